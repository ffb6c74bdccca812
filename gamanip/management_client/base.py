"""
This defines the base class for all management clients. A management client
owns the session with the remote management API (credentials and transport)
and exposes one coroutine per remote operation.
"""

# Standard
from dataclasses import dataclass, replace
from typing import List, Optional, Union
import abc


@dataclass(frozen=True)
class ResourceContext:
    """The path identifiers of a remote call"""

    account_id: Optional[Union[str, int]] = None
    web_property_id: Optional[str] = None
    profile_id: Optional[str] = None
    # Id of the addressed child (custom dimension, custom metric or goal)
    resource_id: Optional[Union[str, int]] = None
    quota_user: Optional[str] = None

    def child(self, **kwargs) -> "ResourceContext":
        """Copy of this context with more path identifiers filled in"""
        return replace(self, **kwargs)


@dataclass
class OperationResult:
    """The result of a remote call: the context it was made with and the
    resulting resource (or list of resources)
    """

    context: ResourceContext
    resource: Optional[Union[dict, List[dict]]] = None


class ManagementClientBase(abc.ABC):
    """
    Base class for management clients. Every operation raises a
    RemoteServiceError when the remote side rejects the call.
    """

    ## Accounts ################################################################

    @abc.abstractmethod
    async def list_account_summaries(self, context: ResourceContext) -> OperationResult:
        """List the summaries of all accounts and their web properties"""

    @abc.abstractmethod
    async def list_accounts(self, context: ResourceContext) -> OperationResult:
        """List all accounts"""

    ## Web Properties ##########################################################

    @abc.abstractmethod
    async def list_web_properties(self, context: ResourceContext) -> OperationResult:
        """List the web properties of context.account_id"""

    @abc.abstractmethod
    async def get_web_property(self, context: ResourceContext) -> OperationResult:
        """Get context.web_property_id"""

    @abc.abstractmethod
    async def insert_web_property(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Create a web property in context.account_id"""

    @abc.abstractmethod
    async def patch_web_property(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Patch context.web_property_id with the given fields"""

    ## Custom Dimensions #######################################################

    @abc.abstractmethod
    async def list_custom_dimensions(self, context: ResourceContext) -> OperationResult:
        """List the custom dimensions of context.web_property_id"""

    @abc.abstractmethod
    async def insert_custom_dimension(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Create a custom dimension in context.web_property_id"""

    @abc.abstractmethod
    async def patch_custom_dimension(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Patch the custom dimension context.resource_id"""

    ## Custom Metrics ##########################################################

    @abc.abstractmethod
    async def list_custom_metrics(self, context: ResourceContext) -> OperationResult:
        """List the custom metrics of context.web_property_id"""

    @abc.abstractmethod
    async def insert_custom_metric(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Create a custom metric in context.web_property_id"""

    @abc.abstractmethod
    async def patch_custom_metric(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Patch the custom metric context.resource_id"""

    ## Views ###################################################################

    @abc.abstractmethod
    async def list_views(self, context: ResourceContext) -> OperationResult:
        """List the views of context.web_property_id"""

    @abc.abstractmethod
    async def get_view(self, context: ResourceContext) -> OperationResult:
        """Get the view context.profile_id"""

    @abc.abstractmethod
    async def insert_view(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Create a view in context.web_property_id"""

    @abc.abstractmethod
    async def patch_view(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Patch the view context.profile_id"""

    ## Goals ###################################################################

    @abc.abstractmethod
    async def list_goals(self, context: ResourceContext) -> OperationResult:
        """List the goals of the view context.profile_id"""

    @abc.abstractmethod
    async def insert_goal(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Create a goal in the view context.profile_id"""

    @abc.abstractmethod
    async def patch_goal(
        self, context: ResourceContext, resource: dict
    ) -> OperationResult:
        """Patch the goal context.resource_id of the view context.profile_id"""

