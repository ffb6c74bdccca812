"""
The DryRunManagementClient implements the ManagementClientBase interface but
does not talk to the remote API. The remote state is held in a local tree of
accounts, web properties, custom dimensions/metrics, views and goals.
"""

# Standard
from typing import Dict, List, Optional, Tuple
import copy
import itertools

# First Party
import alog

# Local
from .. import constants
from ..exceptions import RemoteServiceError
from ..utils import merge_configs
from .base import ManagementClientBase, OperationResult, ResourceContext

log = alog.use_channel("DRY-RUN")

# Keys of the nested child collections in the state tree
_CHILD_KEYS = {
    "accounts": ["webProperties"],
    "webProperties": [
        constants.CUSTOM_DIMENSIONS,
        constants.CUSTOM_METRICS,
        "views",
    ],
    "views": [constants.GOALS],
}

# Record of a single call: (operation name, context, payload)
CALL_RECORD = Tuple[str, ResourceContext, Optional[dict]]


def not_found(kind: str, resource_id) -> RemoteServiceError:
    """Build the error returned for a missing resource"""
    message = f"{kind} {resource_id} not found"
    return RemoteServiceError.from_response(
        404,
        "Not Found",
        message,
        {"code": 404, "errors": [{"reason": "notFound", "message": message}]},
    )


class DryRunManagementClient(ManagementClientBase):
    """
    Management client which doesn't actually manage anything!
    """

    def __init__(self, state: Optional[dict] = None):
        """Construct with an optional initial remote state of the form

            {"accounts": [{"id": ..., "webProperties": [{
                "id": ..., "customDimensions": [...], "customMetrics": [...],
                "views": [{"id": ..., "goals": [...]}]
            }]}]}

        Accounts that are not present are created empty on first use.
        """
        self._accounts: Dict[str, dict] = {}
        self._ids = itertools.count(1)
        self.calls: List[CALL_RECORD] = []
        self._injected_errors: Dict[str, List[Exception]] = {}
        for account in (state or {}).get("accounts", []):
            account = copy.deepcopy(account)
            self._accounts[str(account["id"])] = account

    ## Test and inspection helpers #############################################

    def inject_error(self, operation: str, error: Exception, count: int = 1):
        """Make the next count calls to the named operation raise error"""
        self._injected_errors.setdefault(operation, []).extend([error] * count)

    def calls_to(self, operation: str) -> List[CALL_RECORD]:
        return [call for call in self.calls if call[0] == operation]

    @property
    def mutations(self) -> List[CALL_RECORD]:
        """All insert and patch calls made so far"""
        return [
            call
            for call in self.calls
            if call[0].startswith("insert_") or call[0].startswith("patch_")
        ]

    def get_state(self) -> dict:
        """A copy of the current remote state"""
        return {"accounts": copy.deepcopy(list(self._accounts.values()))}

    ## Accounts ################################################################

    async def list_account_summaries(self, context):
        self._record("list_account_summaries", context)
        summaries = [
            {
                "id": account["id"],
                "name": account.get("name"),
                "webProperties": [
                    self._strip(prop, "webProperties")
                    for prop in account.get("webProperties", [])
                ],
            }
            for account in self._accounts.values()
        ]
        return OperationResult(context, summaries)

    async def list_accounts(self, context):
        self._record("list_accounts", context)
        return OperationResult(
            context,
            [self._strip(account, "accounts") for account in self._accounts.values()],
        )

    ## Web Properties ##########################################################

    async def list_web_properties(self, context):
        self._record("list_web_properties", context)
        props = self._account(context).setdefault("webProperties", [])
        return OperationResult(
            context, [self._strip(prop, "webProperties") for prop in props]
        )

    async def get_web_property(self, context):
        self._record("get_web_property", context)
        return OperationResult(
            context, self._strip(self._web_property(context), "webProperties")
        )

    async def insert_web_property(self, context, resource):
        self._record("insert_web_property", context, resource)
        account = self._account(context)
        props = account.setdefault("webProperties", [])
        prop = copy.deepcopy(resource)
        prop["id"] = f"UA-{account['id']}-{len(props) + 1}"
        prop["accountId"] = account["id"]
        props.append(prop)
        log.debug2("DRY RUN created web property %s", prop["id"])
        return OperationResult(
            context.child(web_property_id=prop["id"]),
            self._strip(prop, "webProperties"),
        )

    async def patch_web_property(self, context, resource):
        self._record("patch_web_property", context, resource)
        prop = self._web_property(context)
        self._patch(prop, resource)
        return OperationResult(context, self._strip(prop, "webProperties"))

    ## Custom Dimensions #######################################################

    async def list_custom_dimensions(self, context):
        self._record("list_custom_dimensions", context)
        return self._list_children(context, constants.CUSTOM_DIMENSIONS)

    async def insert_custom_dimension(self, context, resource):
        self._record("insert_custom_dimension", context, resource)
        return self._insert_indexed(context, constants.CUSTOM_DIMENSIONS, resource)

    async def patch_custom_dimension(self, context, resource):
        self._record("patch_custom_dimension", context, resource)
        return self._patch_child(context, constants.CUSTOM_DIMENSIONS, resource)

    ## Custom Metrics ##########################################################

    async def list_custom_metrics(self, context):
        self._record("list_custom_metrics", context)
        return self._list_children(context, constants.CUSTOM_METRICS)

    async def insert_custom_metric(self, context, resource):
        self._record("insert_custom_metric", context, resource)
        return self._insert_indexed(context, constants.CUSTOM_METRICS, resource)

    async def patch_custom_metric(self, context, resource):
        self._record("patch_custom_metric", context, resource)
        return self._patch_child(context, constants.CUSTOM_METRICS, resource)

    ## Views ###################################################################

    async def list_views(self, context):
        self._record("list_views", context)
        views = self._web_property(context).setdefault("views", [])
        return OperationResult(context, [self._strip(view, "views") for view in views])

    async def get_view(self, context):
        self._record("get_view", context)
        return OperationResult(context, self._strip(self._view(context), "views"))

    async def insert_view(self, context, resource):
        self._record("insert_view", context, resource)
        prop = self._web_property(context)
        view = copy.deepcopy(resource)
        view["id"] = str(100000 + next(self._ids))
        view["accountId"] = prop.get("accountId", context.account_id)
        view["webPropertyId"] = prop["id"]
        prop.setdefault("views", []).append(view)
        log.debug2("DRY RUN created view %s", view["id"])
        return OperationResult(
            context.child(profile_id=view["id"]), self._strip(view, "views")
        )

    async def patch_view(self, context, resource):
        self._record("patch_view", context, resource)
        view = self._view(context)
        self._patch(view, resource)
        return OperationResult(context, self._strip(view, "views"))

    ## Goals ###################################################################

    async def list_goals(self, context):
        self._record("list_goals", context)
        goals = self._view(context).setdefault(constants.GOALS, [])
        return OperationResult(context, copy.deepcopy(goals))

    async def insert_goal(self, context, resource):
        self._record("insert_goal", context, resource)
        goals = self._view(context).setdefault(constants.GOALS, [])
        goal = copy.deepcopy(resource)
        if goal.get("id") is None:
            goal["id"] = len(goals) + 1
        goals.append(goal)
        return OperationResult(
            context.child(resource_id=goal["id"]), copy.deepcopy(goal)
        )

    async def patch_goal(self, context, resource):
        self._record("patch_goal", context, resource)
        goals = self._view(context).setdefault(constants.GOALS, [])
        goal = self._find(goals, context.resource_id, constants.GOALS)
        self._patch(goal, resource)
        return OperationResult(context, copy.deepcopy(goal))

    ## Implementation Details ##################################################

    def _record(self, operation: str, context: ResourceContext, resource=None):
        """Log the call and raise any error injected for this operation"""
        log.info("DRY RUN %s %s", operation, context)
        self.calls.append((operation, context, copy.deepcopy(resource)))
        pending = self._injected_errors.get(operation)
        if pending:
            raise pending.pop(0)

    @staticmethod
    def _strip(resource: dict, kind: str) -> dict:
        """Copy of a state node without its nested child collections"""
        return {
            key: copy.deepcopy(val)
            for key, val in resource.items()
            if key not in _CHILD_KEYS.get(kind, [])
        }

    @staticmethod
    def _find(resources: List[dict], resource_id, kind: str) -> dict:
        for resource in resources:
            if str(resource.get("id")) == str(resource_id):
                return resource
        raise not_found(kind, resource_id)

    @staticmethod
    def _patch(resource: dict, patch: dict):
        resource_id = resource.get("id")
        merge_configs(resource, copy.deepcopy(patch))
        resource["id"] = resource_id

    def _account(self, context: ResourceContext) -> dict:
        account_id = str(context.account_id)
        if account_id not in self._accounts:
            log.debug("DRY RUN creating empty account %s", account_id)
            self._accounts[account_id] = {"id": account_id, "webProperties": []}
        return self._accounts[account_id]

    def _web_property(self, context: ResourceContext) -> dict:
        return self._find(
            self._account(context).get("webProperties", []),
            context.web_property_id,
            "webProperties",
        )

    def _view(self, context: ResourceContext) -> dict:
        return self._find(
            self._web_property(context).get("views", []),
            context.profile_id,
            "views",
        )

    def _list_children(self, context: ResourceContext, key: str) -> OperationResult:
        children = self._web_property(context).setdefault(key, [])
        return OperationResult(context, copy.deepcopy(children))

    def _insert_indexed(
        self, context: ResourceContext, key: str, resource: dict
    ) -> OperationResult:
        """Insert a custom dimension or metric, which are indexed by position"""
        children = self._web_property(context).setdefault(key, [])
        child = copy.deepcopy(resource)
        index = len(children) + 1
        child["index"] = index
        if child.get("id") is None:
            prefix = "dimension" if key == constants.CUSTOM_DIMENSIONS else "metric"
            child["id"] = f"ga:{prefix}{index}"
        children.append(child)
        return OperationResult(
            context.child(resource_id=child["id"]), copy.deepcopy(child)
        )

    def _patch_child(
        self, context: ResourceContext, key: str, resource: dict
    ) -> OperationResult:
        children = self._web_property(context).setdefault(key, [])
        child = self._find(children, context.resource_id, key)
        self._patch(child, resource)
        return OperationResult(context, copy.deepcopy(child))
