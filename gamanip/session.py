"""
This module holds the session state for an individual reconciliation
"""

# Standard
from typing import Optional, Union
import base64
import uuid

# First Party
import alog

# Local
from . import config
from .management_client import ManagementClientBase, ResourceContext

log = alog.use_channel("SESSION")


def generate_id() -> str:
    """Generates a unique human readable id for a reconciliation

    Returns:
        id: str
            A unique base32 encoded id
    """
    base32_str = base64.b32encode(uuid.uuid4().bytes).decode("utf-8")
    reconcile_id = base32_str[:22]
    log.debug("Generated reconcile id: %s", reconcile_id)
    return reconcile_id


class Session:
    """A session binds the management client (which owns the credentials and
    transport) to a single reconciliation
    """

    # We strictly define the set of attributes that a Session can have to
    # disallow arbitrary assignment
    __slots__ = ["__id", "__client", "__quota_user"]

    def __init__(
        self,
        client: ManagementClientBase,
        reconciliation_id: Optional[str] = None,
        quota_user: Optional[str] = None,
    ):
        """Construct a session object to hold the state for a reconciliation

        Args:
            client:  ManagementClientBase
                The client that runs the remote operations
            reconciliation_id:  Optional[str]
                The unique ID for this reconciliation. Generated if not given.
            quota_user:  Optional[str]
                Quota user attached to every remote call. Defaults to
                config.quota_user
        """
        self.__id = reconciliation_id or generate_id()
        self.__client = client
        self.__quota_user = quota_user if quota_user is not None else config.quota_user

    ## Properties ##############################################################

    @property
    def id(self) -> str:  # pylint: disable=invalid-name
        """The unique reconciliation ID"""
        return self.__id

    @property
    def client(self) -> ManagementClientBase:
        """The management client for this reconciliation"""
        return self.__client

    @property
    def quota_user(self) -> Optional[str]:
        return self.__quota_user

    ## Utilities ###############################################################

    def context(
        self, account_id: Union[str, int], **path_ids
    ) -> ResourceContext:
        """Build the context for a remote call on the given account

        Args:
            account_id:  Union[str, int]
                The account the call is made against
            **path_ids:
                Any of web_property_id, profile_id and resource_id

        Returns:
            context:  ResourceContext
                The context carrying the path ids and the quota user
        """
        return ResourceContext(
            account_id=account_id, quota_user=self.quota_user, **path_ids
        )
