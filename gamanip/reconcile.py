"""
The ReconcileManager runs an individual reconciliation of a Description against
the remote management API, creating or patching only what differs.

The reconciliation is a strict sequence of stages:

    1. Resolve the web property (by unique key, by insert, or by id)
    2. Patch the web property if it differs
    3. Reconcile the custom metrics (positional)
    4. Reconcile the custom dimensions (positional)
    5. Reconcile the views, and the goals of each view (positional)

Every stage consumes the snapshot produced by the previous one and returns an
updated snapshot. Entries of a list are reconciled one after the other, never
concurrently. Every remote call goes through the backoff wrapper.
"""

# Standard
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union
import copy

# First Party
import alog

# Local
from . import config
from .backoff import SLEEP_FUNCTION, backoff
from .correlation import CorrelationStrategy, PositionalCorrelation
from .description import Description, Goal, View, ViewDescription
from .diff import requires_patch
from .exceptions import GenericServiceError, assert_precondition
from .management_client import OperationResult, ResourceContext
from .session import Session

log = alog.use_channel("RECONCILE")

# Signature of a remote operation on the management client
REMOTE_OPERATION = Callable[..., Awaitable[OperationResult]]


## Data models #################################################################


@dataclass
class ReconciliationResult:
    """ReconciliationResult is the result of a safe reconciliation"""

    # The last snapshot of the description. On failure, this holds the ids
    # assigned before the failure.
    description: Optional[Description]
    # The wrapped error if the reconciliation failed
    exception: Optional[GenericServiceError] = None

    @property
    def success(self) -> bool:
        return self.exception is None


## ReconcileManager ############################################################


class ReconcileManager:
    """This class runs reconciliations of description trees against the remote
    management API through the client held by a Session.
    """

    def __init__(
        self,
        metric_strategy: Optional[CorrelationStrategy] = None,
        dimension_strategy: Optional[CorrelationStrategy] = None,
        goal_strategy: Optional[CorrelationStrategy] = None,
        sleep: Optional[SLEEP_FUNCTION] = None,
    ):
        """
        Args:
            metric_strategy:  Optional[CorrelationStrategy]
                Correlation for custom metrics. Defaults to positional with ids
                from config.positional_ids.custom_metric
            dimension_strategy:  Optional[CorrelationStrategy]
                Correlation for custom dimensions. Defaults to positional with
                ids from config.positional_ids.custom_dimension
            goal_strategy:  Optional[CorrelationStrategy]
                Correlation for goals. Defaults to positional with plain integer
                ids
            sleep:  Optional[SLEEP_FUNCTION]
                Sleep used by the backoff between retries
        """
        self.metric_strategy = metric_strategy or PositionalCorrelation(
            config.positional_ids.custom_metric, set_index=True
        )
        self.dimension_strategy = dimension_strategy or PositionalCorrelation(
            config.positional_ids.custom_dimension, set_index=True
        )
        self.goal_strategy = goal_strategy or PositionalCorrelation()
        self._sleep = sleep
        self._progress = None

    @property
    def progress(self) -> Optional[Description]:
        """The most recent snapshot published by the running (or last)
        reconciliation
        """
        return self._progress

    ## Reconciliation ##########################################################

    async def make(
        self,
        session: Session,
        description: Union[Description, dict],
    ) -> Description:
        """Reconcile the description against the remote side.

        The given description is not modified. Errors from remote calls (after
        retries) propagate unchanged and nothing done before the failure is
        rolled back; the progress property then holds the ids assigned so far.

        Args:
            session:  Session
                The session holding the management client
            description:  Union[Description, dict]
                The desired state

        Returns:
            description:  Description
                The reconciled snapshot with all resolved remote ids filled in
        """
        self._progress = None
        if not isinstance(description, Description):
            description = Description.from_dict(description)
        assert_precondition(
            description.account_id is not None and description.account_id != "",
            "accountId should be defined",
        )
        assert_precondition(
            description.web_property is not None, "webProperty should be defined"
        )

        snapshot = copy.deepcopy(description)
        self._checkpoint(snapshot)
        with alog.ContextTimer(log.info, "Reconcile [%s] finished in: ", session.id):
            log.info(
                "Reconciling account %s [%s]", snapshot.account_id, session.id
            )
            snapshot, observed = await self.resolve_web_property(session, snapshot)
            snapshot = await self.reconcile_web_property(session, snapshot, observed)
            snapshot = await self.reconcile_custom_metrics(session, snapshot)
            snapshot = await self.reconcile_custom_dimensions(session, snapshot)
            snapshot = await self.reconcile_views(session, snapshot)
        return snapshot

    async def safe_make(
        self,
        session: Session,
        description: Union[Description, dict],
    ) -> ReconciliationResult:
        """Run make but capture any error in the result instead of raising it

        Returns:
            result:  ReconciliationResult
                The final snapshot, or the partial snapshot and the wrapped
                error on failure
        """
        try:
            return ReconciliationResult(description=await self.make(session, description))
        except Exception as exc:  # pylint: disable=broad-except
            log.warning("Handling caught error in reconcile: %s", exc, exc_info=True)
            return ReconciliationResult(
                description=self.progress, exception=GenericServiceError(exc)
            )

    ## Stages ##################################################################

    async def resolve_web_property(
        self,
        session: Session,
        snapshot: Description,
    ) -> Tuple[Description, Optional[dict]]:
        """Find out which remote web property the description refers to.

        Returns:
            snapshot:  Description
                The snapshot with the web property id filled in
            observed:  Optional[dict]
                The remote web property to diff against, or None when there is
                nothing to diff (freshly inserted, or not found by key)
        """
        prop = snapshot.web_property
        context = session.context(snapshot.account_id)

        if prop.id is None and prop.unique_key:
            log.debug("Looking up web property by [%s]", prop.unique_key)
            result = await self._call(session.client.list_web_properties, context)
            found = find_by_key(result.resource, prop.unique_key, prop.unique_value())
            if found is None:
                log.warning(
                    "No web property found with %s=%s in account %s",
                    prop.unique_key,
                    prop.unique_value(),
                    snapshot.account_id,
                )
                return snapshot, None
            snapshot = replace(snapshot, web_property=replace(prop, id=found["id"]))
            observed = found

        elif prop.id is None:
            log.debug("Inserting web property")
            result = await self._call(
                session.client.insert_web_property, context, prop.to_resource()
            )
            snapshot = replace(
                snapshot, web_property=replace(prop, id=result.resource["id"])
            )
            observed = None

        else:
            log.debug("Fetching web property %s", prop.id)
            result = await self._call(
                session.client.get_web_property,
                context.child(web_property_id=prop.id),
            )
            observed = result.resource
            if observed and _same_id(prop.id, observed.get("id")):
                snapshot = replace(
                    snapshot, web_property=replace(prop, id=observed["id"])
                )

        log.debug2("Resolved web property %s", snapshot.web_property_id)
        self._checkpoint(snapshot)
        return snapshot, observed

    async def reconcile_web_property(
        self,
        session: Session,
        snapshot: Description,
        observed: Optional[dict],
    ) -> Description:
        """Patch the web property if the observed state differs"""
        if observed is None:
            return snapshot
        desired = snapshot.web_property.to_resource()
        if requires_patch(observed, desired):
            log.debug("Patching web property %s", snapshot.web_property_id)
            await self._call(
                session.client.patch_web_property,
                session.context(
                    snapshot.account_id, web_property_id=snapshot.web_property_id
                ),
                desired,
            )
        else:
            log.debug2("Web property %s is up to date", snapshot.web_property_id)
        return snapshot

    async def reconcile_custom_metrics(
        self,
        session: Session,
        snapshot: Description,
    ) -> Description:
        """Reconcile the custom metrics by position"""
        metrics = snapshot.custom_metrics
        if not metrics or not self._has_web_property(snapshot, "custom metrics"):
            return snapshot
        metrics = await self._reconcile_positional(
            entries=metrics,
            context=self._web_property_context(session, snapshot),
            strategy=self.metric_strategy,
            list_operation=session.client.list_custom_metrics,
            insert_operation=session.client.insert_custom_metric,
            patch_operation=session.client.patch_custom_metric,
            publish=lambda done: self._checkpoint(
                replace(snapshot, custom_metrics=done + metrics[len(done) :])
            ),
        )
        return replace(snapshot, custom_metrics=metrics)

    async def reconcile_custom_dimensions(
        self,
        session: Session,
        snapshot: Description,
    ) -> Description:
        """Reconcile the custom dimensions by position"""
        dimensions = snapshot.custom_dimensions
        if not dimensions or not self._has_web_property(
            snapshot, "custom dimensions"
        ):
            return snapshot
        dimensions = await self._reconcile_positional(
            entries=dimensions,
            context=self._web_property_context(session, snapshot),
            strategy=self.dimension_strategy,
            list_operation=session.client.list_custom_dimensions,
            insert_operation=session.client.insert_custom_dimension,
            patch_operation=session.client.patch_custom_dimension,
            publish=lambda done: self._checkpoint(
                replace(snapshot, custom_dimensions=done + dimensions[len(done) :])
            ),
        )
        return replace(snapshot, custom_dimensions=dimensions)

    async def reconcile_views(
        self,
        session: Session,
        snapshot: Description,
    ) -> Description:
        """Reconcile every view, then the goals of that view"""
        views = snapshot.views
        if not views or not self._has_web_property(snapshot, "views"):
            return snapshot
        context = self._web_property_context(session, snapshot)

        # The remote views are only needed to look up views by id or by key
        existing = []
        if any(entry.view.id is not None or entry.view.unique_key for entry in views):
            result = await self._call(session.client.list_views, context)
            existing = result.resource or []

        done = []
        for entry in views:
            done.append(await self.reconcile_view(session, context, entry, existing))
            snapshot = replace(snapshot, views=done + views[len(done) :])
            self._checkpoint(snapshot)
        return snapshot

    async def reconcile_view(
        self,
        session: Session,
        context: ResourceContext,
        entry: ViewDescription,
        existing: Sequence[dict],
    ) -> ViewDescription:
        """Resolve and reconcile a single view along with its goals.

        NOTE: Filters are carried through unchanged. They are not synchronized
            with the remote side.
        """
        view = entry.view
        resolved = True
        if view.id is None and view.unique_key:
            found = find_by_key(existing, view.unique_key, view.unique_value())
            if found is None:
                resolved = False
                log.warning(
                    "No view found with %s=%s", view.unique_key, view.unique_value()
                )
            else:
                view = replace(view, id=found["id"])
                await self._patch_view_if_changed(session, context, view, found)

        elif view.id is None:
            log.debug("Inserting view [%s]", view.name)
            result = await self._call(
                session.client.insert_view, context, view.to_resource()
            )
            view = replace(view, id=result.resource["id"])

        else:
            found = find_by_key(existing, "id", view.id)
            if found is None:
                resolved = False
                log.warning("View %s not found in web property", view.id)
            else:
                view = replace(view, id=found["id"])
                await self._patch_view_if_changed(session, context, view, found)

        entry = replace(entry, view=view)
        if entry.filters:
            log.debug2(
                "Leaving %d filter(s) of view %s unsynchronized",
                len(entry.filters),
                view.id,
            )
        if not resolved:
            if entry.goals:
                log.warning("Skipping goals of unresolved view [%s]", view.name)
            return entry

        goals = await self.reconcile_goals(
            session, context.child(profile_id=view.id), entry.goals
        )
        return replace(entry, goals=goals)

    async def reconcile_goals(
        self,
        session: Session,
        context: ResourceContext,
        goals: List[Goal],
    ) -> List[Goal]:
        """Reconcile the goals of a resolved view by position"""
        if not goals:
            return goals
        return await self._reconcile_positional(
            entries=goals,
            context=context,
            strategy=self.goal_strategy,
            list_operation=session.client.list_goals,
            insert_operation=session.client.insert_goal,
            patch_operation=session.client.patch_goal,
        )

    ## Implementation Details ##################################################

    async def _call(self, operation: REMOTE_OPERATION, *args) -> OperationResult:
        """Run a remote operation with backoff"""
        return await backoff(operation, sleep=self._sleep)(*args)

    async def _reconcile_positional(  # pylint: disable=too-many-arguments
        self,
        entries: List[Any],
        context: ResourceContext,
        strategy: CorrelationStrategy,
        list_operation: REMOTE_OPERATION,
        insert_operation: REMOTE_OPERATION,
        patch_operation: REMOTE_OPERATION,
        publish: Optional[Callable[[List[Any]], None]] = None,
    ) -> List[Any]:
        """Shared fold for the collections whose entries are correlated with the
        remote entries by the given strategy. The remote collection is listed
        once before any entry is touched.
        """
        result = await self._call(list_operation, context)
        observed = result.resource or []
        log.debug2("Found %d remote entries", len(observed))

        reconciled = []
        for position, entry, remote in strategy.correlate(entries, observed):
            # Ids are held in the representation of the remote side
            if remote is not None and _same_id(entry.id, remote.get("id")):
                entry = replace(entry, id=remote["id"])
            if remote is None:
                entry = strategy.assign_identity(entry, position)
                log.debug("Inserting %s at position %d", type(entry).__name__, position)
                result = await self._call(
                    insert_operation, context, entry.to_resource()
                )
                entry = _adopt_id(entry, result)
            elif requires_patch(remote, entry.to_resource()):
                entry = strategy.assign_identity(entry, position)
                log.debug("Patching %s at position %d", type(entry).__name__, position)
                # The remote entry is addressed by its own id
                result = await self._call(
                    patch_operation,
                    context.child(resource_id=remote.get("id", entry.id)),
                    entry.to_resource(),
                )
                entry = _adopt_id(entry, result)
            else:
                log.debug3("%s at position %d is up to date", type(entry).__name__, position)
                if remote.get("id") is not None:
                    entry = replace(entry, id=remote["id"])
            reconciled.append(entry)
            if publish:
                publish(list(reconciled))
        return reconciled

    async def _patch_view_if_changed(
        self,
        session: Session,
        context: ResourceContext,
        view: View,
        observed: dict,
    ):
        desired = view.to_resource()
        if requires_patch(observed, desired):
            log.debug("Patching view %s", view.id)
            await self._call(
                session.client.patch_view, context.child(profile_id=view.id), desired
            )
        else:
            log.debug2("View %s is up to date", view.id)

    def _checkpoint(self, snapshot: Description):
        self._progress = snapshot

    @staticmethod
    def _has_web_property(snapshot: Description, stage_name: str) -> bool:
        if snapshot.web_property_id is None:
            log.warning("No web property resolved. Skipping %s", stage_name)
            return False
        return True

    @staticmethod
    def _web_property_context(session: Session, snapshot: Description) -> ResourceContext:
        return session.context(
            snapshot.account_id, web_property_id=snapshot.web_property_id
        )


## Helpers #####################################################################


def find_by_key(resources: Optional[Sequence[dict]], key: str, value: Any) -> Optional[dict]:
    """Find the first resource whose key field matches the value. Ids are
    compared as strings.
    """
    if value is None:
        return None
    for resource in resources or []:
        candidate = resource.get(key)
        if candidate == value or (key == "id" and _same_id(value, candidate)):
            return resource
    return None


def _same_id(declared: Any, remote: Any) -> bool:
    """Whether two ids name the same resource. The remote side returns ids as
    strings while a description may hold numeric ones.
    """
    return declared is not None and remote is not None and str(declared) == str(remote)


def _adopt_id(entry: Any, result: OperationResult) -> Any:
    """Take over the id returned by the remote side if there is one"""
    resource = result.resource if isinstance(result.resource, dict) else {}
    if resource.get("id") is not None:
        return replace(entry, id=resource["id"])
    return entry


async def make(session: Session, description: Union[Description, dict]) -> Description:
    """Reconcile a description with a default ReconcileManager"""
    return await ReconcileManager().make(session, description)
