"""
Custom logging formats that contain more detailed gamanip logs
"""

# First Party
from alog import AlogJsonFormatter
import alog

# Local
from . import config


class GamanipJsonFormatter(AlogJsonFormatter):
    """Custom Log Format that extends AlogJsonFormatter to add the identifiers
    of the reconciliation being run (reconciliationId and accountId) along with
    thread information
    """

    _FIELDS_TO_PRINT = AlogJsonFormatter._FIELDS_TO_PRINT + [
        "process",
        "thread",
        "threadName",
        "reconciliationId",
        "accountId",
    ]

    def __init__(self, reconciliation_id=None, account_id=None):
        super().__init__()
        self.reconciliation_id = reconciliation_id
        self.account_id = account_id

    def format(self, record):
        if self.reconciliation_id:
            record.reconciliationId = self.reconciliation_id
        account_id = getattr(record, "account_id", self.account_id)
        if account_id is not None:
            record.accountId = account_id
        return super().format(record)


def configure_logging(reconciliation_id=None, account_id=None):
    """(Re)configure alog from the current library config. With log_json, the
    given ids are stamped onto every record.
    """
    alog.configure(
        default_level=config.log_level,
        filters=config.log_filters,
        formatter=GamanipJsonFormatter(reconciliation_id, account_id)
        if config.log_json
        else "pretty",
        thread_id=config.log_thread_id,
    )
