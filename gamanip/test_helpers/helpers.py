"""
This module holds common helper functions for making testing easy
"""

# Standard
from contextlib import contextmanager
from typing import List, Optional
from unittest import mock
import copy
import inspect
import os

# First Party
import alog

# Local
from gamanip.config import library_config as config_detail_dict
from gamanip.description import Description
from gamanip.exceptions import RemoteServiceError
from gamanip.management_client import DryRunManagementClient
from gamanip.session import Session

log = alog.use_channel("TEST")


def configure_logging():
    alog.configure(
        os.environ.get("LOG_LEVEL", "off"),
        os.environ.get("LOG_FILTERS", ""),
        formatter="json"
        if os.environ.get("LOG_JSON", "").lower() == "true"
        else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


configure_logging()

TEST_ACCOUNT_ID = 42
TEST_RECONCILIATION_ID = "test-reconciliation"

SAMPLE_WEB_PROPERTY = {
    "name": "NewAcc",
    "websiteUrl": "http://someUrl.com",
    "industryVertical": "UNSPECIFIED",
}

SAMPLE_DIMENSIONS = [
    {"name": "Position", "scope": "SESSION", "active": True},
    {"name": "Date", "scope": "SESSION", "active": True},
]

SAMPLE_METRICS = [
    {"name": "Revenue", "scope": "HIT", "active": True, "type": "CURRENCY"},
]

SAMPLE_GOALS = [
    {
        "active": True,
        "name": "ConAB",
        "type": "EVENT",
        "eventDetails": {
            "useEventValue": True,
            "eventConditions": [
                {"type": "CATEGORY", "matchType": "EXACT", "expression": "Conversion"}
            ],
        },
    },
]

SAMPLE_FILTERS = [
    {
        "uniqueKey": "name",
        "name": "My Domain Filter",
        "type": "EXCLUDE",
        "excludeDetails": {
            "field": "GEO_DOMAIN",
            "matchType": "EQUAL",
            "expressionValue": "example.com",
            "caseSensitive": False,
        },
    }
]


def sample_description_dict(
    account_id=TEST_ACCOUNT_ID,
    web_property=None,
    custom_dimensions=None,
    custom_metrics=None,
    views=None,
) -> dict:
    """Build a serialized description with sample content for any section that
    is not given
    """
    return {
        "accountId": account_id,
        "webProperty": copy.deepcopy(
            SAMPLE_WEB_PROPERTY if web_property is None else web_property
        ),
        "customDimensions": copy.deepcopy(
            SAMPLE_DIMENSIONS if custom_dimensions is None else custom_dimensions
        ),
        "customMetrics": copy.deepcopy(
            SAMPLE_METRICS if custom_metrics is None else custom_metrics
        ),
        "views": copy.deepcopy(
            [
                {
                    "view": {"name": "New View", "websiteUrl": "http://someUrl.com"},
                    "goals": SAMPLE_GOALS,
                    "filters": SAMPLE_FILTERS,
                }
            ]
            if views is None
            else views
        ),
    }


def sample_description(**kwargs) -> Description:
    return Description.from_dict(sample_description_dict(**kwargs))


def remote_state(account_id=TEST_ACCOUNT_ID, web_properties=None) -> dict:
    """Build an initial state for the DryRunManagementClient"""
    return {
        "accounts": [
            {"id": str(account_id), "webProperties": copy.deepcopy(web_properties or [])}
        ]
    }


def remote_error(
    reason: str,
    status_code: int = 403,
    message: str = "",
) -> RemoteServiceError:
    """Build the error the remote API raises with the given reason"""
    return RemoteServiceError.from_response(
        status_code,
        "Forbidden" if status_code == 403 else "",
        message or reason,
        {"code": status_code, "errors": [{"reason": reason, "message": message}]},
    )


def setup_session(client=None, state=None, **kwargs) -> Session:
    client = client or MockManagementClient(state=state)
    kwargs.setdefault("reconciliation_id", TEST_RECONCILIATION_ID)
    return Session(client, **kwargs)


class RecordingSleep:
    """Awaitable sleep replacement that records the requested delays"""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)

    @property
    def delays_ms(self) -> List[int]:
        return [round(delay * 1000) for delay in self.delays]


@contextmanager
def library_config(**config_overrides):
    """This context manager sets library config values temporarily and reverts
    them on completion
    """
    # Override the configs and hang onto the old values
    old_vals = {}
    for key, val in config_overrides.items():
        if key in config_detail_dict:
            old_vals[key] = config_detail_dict[key]
        config_detail_dict[key] = val

    # Yield to the context
    try:
        yield

    # Revert to the old values
    finally:
        for key in config_overrides:
            if key in old_vals:
                config_detail_dict[key] = old_vals[key]
            else:
                del config_detail_dict[key]


def get_failable_method(fail_flag, method):
    """Wrap a coroutine method so that it raises the given error (or calls the
    given callable first) before passing through
    """
    log.debug4(
        "Setting up failable mock of [%s] with fail flag: %s", str(method), fail_flag
    )

    async def failable_method(*args, **kwargs):
        if isinstance(fail_flag, Exception) or (
            inspect.isclass(fail_flag) and issubclass(fail_flag, Exception)
        ):
            log.debug4("Raising in failable mock")
            raise fail_flag
        if callable(fail_flag):
            log.debug4("Calling callable fail flag")
            fail_flag()
        return await method(*args, **kwargs)

    return failable_method


class FailOnce:
    """Helper callable that will fail once on the N'th call"""

    def __init__(self, fail_val, fail_number=1):
        self.call_count = 0
        self.fail_number = fail_number
        self.fail_val = fail_val

    def __call__(self, *_, **__):
        self.call_count += 1
        if self.call_count == self.fail_number:
            log.debug("Failing on call %d with %s", self.call_count, self.fail_val)
            raise self.fail_val
        log.debug("Not failing on call %d", self.call_count)


class MockManagementClient(DryRunManagementClient):
    """The MockManagementClient wraps a standard DryRunManagementClient and
    replaces each of its operations with an AsyncMock so that calls can be
    asserted on and failures can be configured per operation.
    """

    OPERATIONS = [
        "list_account_summaries",
        "list_accounts",
        "list_web_properties",
        "get_web_property",
        "insert_web_property",
        "patch_web_property",
        "list_custom_dimensions",
        "insert_custom_dimension",
        "patch_custom_dimension",
        "list_custom_metrics",
        "insert_custom_metric",
        "patch_custom_metric",
        "list_views",
        "get_view",
        "insert_view",
        "patch_view",
        "list_goals",
        "insert_goal",
        "patch_goal",
    ]

    def __init__(
        self,
        state: Optional[dict] = None,
        fail_on: Optional[dict] = None,
        auto_enable: bool = True,
    ):
        """
        Args:
            state:  Optional[dict]
                The initial remote state
            fail_on:  Optional[dict]
                Map from operation name to the fail flag for that operation (an
                exception to raise, or a callable to run before passing
                through)
            auto_enable:  bool
                If True, turn the mocks on now
        """
        super().__init__(state)
        self.fail_on = fail_on or {}
        if auto_enable:
            self.enable_mocks()

    def enable_mocks(self):
        """Turn the mocks on"""
        for operation in self.OPERATIONS:
            method = getattr(super(), operation)
            if operation in self.fail_on:
                method = get_failable_method(self.fail_on[operation], method)
            setattr(self, operation, mock.AsyncMock(side_effect=method))
