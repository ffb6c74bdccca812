"""
Tests for the ReconcileManager
"""

# Standard
import copy

# Third Party
import pytest
import yaml

# Local
from gamanip.correlation import PositionalCorrelation
from gamanip.description import (
    CustomMetric,
    Description,
    DescriptionBuilder,
    View,
    ViewDescription,
    WebProperty,
)
from gamanip.exceptions import GenericServiceError, RemoteServiceError, ValidationError
from gamanip.management_client import DryRunManagementClient
from gamanip.reconcile import ReconcileManager, ReconciliationResult, find_by_key, make
from gamanip.test_helpers.helpers import (
    SAMPLE_DIMENSIONS,
    SAMPLE_GOALS,
    SAMPLE_METRICS,
    TEST_ACCOUNT_ID,
    FailOnce,
    MockManagementClient,
    RecordingSleep,
    remote_error,
    remote_state,
    sample_description,
    sample_description_dict,
    setup_session,
)

## Helpers #####################################################################


def call_names(client):
    return [call[0] for call in client.calls]


def mutation_names(client):
    return [call[0] for call in client.mutations]


def existing_property(**kwargs):
    prop = {
        "id": "UA-42-1",
        "name": "NewAcc",
        "websiteUrl": "http://someUrl.com",
        "industryVertical": "UNSPECIFIED",
    }
    prop.update(kwargs)
    return prop


def keyed_description(**kwargs):
    """Description that finds its web property and view by name"""
    kwargs.setdefault(
        "views",
        [
            {
                "view": {
                    "name": "New View",
                    "websiteUrl": "http://someUrl.com",
                    "uniqueKey": "name",
                },
                "goals": SAMPLE_GOALS,
            }
        ],
    )
    data = sample_description_dict(**kwargs)
    data["webProperty"]["uniqueKey"] = "name"
    return Description.from_dict(data)


## Preconditions ###############################################################


@pytest.mark.asyncio
@pytest.mark.parametrize("account_id", [None, ""])
async def test_missing_account_id(account_id):
    """Make sure a description without an account id is rejected before any
    remote call is made
    """
    session = setup_session()
    description = sample_description(account_id=account_id)
    with pytest.raises(ValidationError) as exc_info:
        await ReconcileManager().make(session, description)
    assert exc_info.value.status_code == 412
    assert session.client.calls == []


@pytest.mark.asyncio
async def test_missing_web_property():
    session = setup_session()
    with pytest.raises(ValidationError, match="webProperty"):
        await ReconcileManager().make(session, Description(account_id=1))
    assert session.client.calls == []


## End to end ##################################################################


@pytest.mark.asyncio
async def test_insert_web_property_only():
    """Make sure a new web property with empty child lists results in exactly
    one insert and the returned id is written into the tree
    """
    session = setup_session()
    description = Description.from_dict(
        {
            "accountId": TEST_ACCOUNT_ID,
            "webProperty": {"name": "A", "websiteUrl": "http://a"},
            "customDimensions": [],
            "customMetrics": [],
            "views": [],
        }
    )
    result = await ReconcileManager().make(session, description)
    assert call_names(session.client) == ["insert_web_property"]
    assert result.web_property_id == "UA-42-1"
    assert result.web_property.name == "A"
    session.client.insert_web_property.assert_called_once()
    _, payload = session.client.insert_web_property.call_args.args
    assert payload == {
        "name": "A",
        "websiteUrl": "http://a",
        "industryVertical": "UNSPECIFIED",
    }


@pytest.mark.asyncio
async def test_input_not_mutated():
    """Make sure the given description is left untouched"""
    session = setup_session()
    description = sample_description()
    original = copy.deepcopy(description)
    result = await ReconcileManager().make(session, description)
    assert description == original
    assert result != original


@pytest.mark.asyncio
async def test_full_tree_on_empty_remote():
    """Make sure every part of the tree is created in stage order with the
    positional ids assigned
    """
    session = setup_session()
    result = await ReconcileManager().make(session, sample_description())

    assert call_names(session.client) == [
        "insert_web_property",
        "list_custom_metrics",
        "insert_custom_metric",
        "list_custom_dimensions",
        "insert_custom_dimension",
        "insert_custom_dimension",
        "insert_view",
        "list_goals",
        "insert_goal",
    ]
    assert result.web_property_id == "UA-42-1"
    assert [(m.id, m.index) for m in result.custom_metrics] == [("metric1", 1)]
    assert [(d.id, d.index) for d in result.custom_dimensions] == [
        ("dimension1", 1),
        ("dimension2", 2),
    ]
    assert result.views[0].profile_id is not None
    assert [goal.id for goal in result.views[0].goals] == [1]

    # Filters stay in the tree but never reach the remote side
    assert result.views[0].filters[0].name == "My Domain Filter"
    _, _, view_payload = session.client.calls_to("insert_view")[0]
    assert "filters" not in view_payload
    assert "uniqueKey" not in view_payload


@pytest.mark.asyncio
async def test_positional_payloads():
    """Make sure inserts carry the assigned positional id and index"""
    session = setup_session()
    await ReconcileManager().make(session, sample_description())
    payloads = [call[2] for call in session.client.calls_to("insert_custom_dimension")]
    assert [(p["id"], p["index"], p["name"]) for p in payloads] == [
        ("dimension1", 1, "Position"),
        ("dimension2", 2, "Date"),
    ]
    _, _, goal_payload = session.client.calls_to("insert_goal")[0]
    assert goal_payload["id"] == 1


@pytest.mark.asyncio
async def test_undeclared_lists_skipped():
    """Make sure dimension and metric lists that are not declared are never
    listed remotely
    """
    session = setup_session()
    description = Description.from_dict(
        {"accountId": TEST_ACCOUNT_ID, "webProperty": {"name": "A"}}
    )
    await ReconcileManager().make(session, description)
    assert call_names(session.client) == ["insert_web_property"]


@pytest.mark.asyncio
async def test_make_accepts_dict():
    session = setup_session()
    result = await make(session, sample_description_dict(views=[]))
    assert isinstance(result, Description)
    assert result.web_property_id == "UA-42-1"


## Idempotence #################################################################


@pytest.mark.asyncio
async def test_second_run_with_result_is_noop():
    """Make sure running again with the reconciled tree issues no inserts or
    patches
    """
    session = setup_session()
    manager = ReconcileManager()
    first = await manager.make(session, sample_description())
    first_calls = len(session.client.calls)

    second = await manager.make(session, first)
    second_calls = session.client.calls[first_calls:]
    assert [call[0] for call in second_calls] == [
        "get_web_property",
        "list_custom_metrics",
        "list_custom_dimensions",
        "list_views",
        "list_goals",
    ]
    assert second == first


@pytest.mark.asyncio
async def test_second_run_same_description_is_noop():
    """Make sure running the same keyed description twice only mutates on the
    first run
    """
    session = setup_session(
        state=remote_state(
            web_properties=[
                existing_property(
                    views=[{"id": "7", "name": "New View", "websiteUrl": "http://someUrl.com", "type": "WEB"}]
                )
            ]
        )
    )
    description = keyed_description()
    manager = ReconcileManager()

    await manager.make(session, description)
    assert mutation_names(session.client) == [
        "insert_custom_metric",
        "insert_custom_dimension",
        "insert_custom_dimension",
        "insert_goal",
    ]

    mutations = len(session.client.mutations)
    result = await manager.make(session, description)
    assert len(session.client.mutations) == mutations
    assert result.web_property_id == "UA-42-1"
    assert result.views[0].profile_id == "7"


## Web property resolution #####################################################


@pytest.mark.asyncio
async def test_web_property_by_key():
    """Make sure a web property found by its unique key is adopted and patched
    when it differs
    """
    session = setup_session(
        state=remote_state(
            web_properties=[
                existing_property(id="UA-42-1", name="Other"),
                existing_property(id="UA-42-2", websiteUrl="http://old.com"),
            ]
        )
    )
    description = keyed_description(custom_dimensions=[], custom_metrics=[], views=[])
    result = await ReconcileManager().make(session, description)

    assert result.web_property_id == "UA-42-2"
    assert result.web_property.unique_key == "name"
    assert call_names(session.client) == ["list_web_properties", "patch_web_property"]
    _, context, payload = session.client.calls_to("patch_web_property")[0]
    assert context.web_property_id == "UA-42-2"
    assert payload["websiteUrl"] == "http://someUrl.com"
    assert "uniqueKey" not in payload


@pytest.mark.asyncio
async def test_web_property_by_key_not_found():
    """Make sure a web property that is not found by key is neither inserted
    nor used by the later stages
    """
    session = setup_session(
        state=remote_state(web_properties=[existing_property(name="Other")])
    )
    result = await ReconcileManager().make(session, keyed_description())
    assert call_names(session.client) == ["list_web_properties"]
    assert result.web_property_id is None
    assert result.custom_metrics[0].id is None


@pytest.mark.asyncio
async def test_web_property_by_id_unchanged():
    """Make sure a known web property that matches is fetched but not patched"""
    session = setup_session(state=remote_state(web_properties=[existing_property()]))
    description = sample_description(custom_dimensions=[], custom_metrics=[], views=[])
    description.web_property = WebProperty.from_resource(existing_property())
    await ReconcileManager().make(session, description)
    assert call_names(session.client) == ["get_web_property"]
    _, context, _ = session.client.calls[0]
    assert context.web_property_id == "UA-42-1"
    assert context.account_id == TEST_ACCOUNT_ID


@pytest.mark.asyncio
async def test_web_property_by_id_changed():
    session = setup_session(state=remote_state(web_properties=[existing_property()]))
    description = sample_description(custom_dimensions=[], custom_metrics=[], views=[])
    description.web_property = WebProperty.from_resource(
        existing_property(name="Renamed")
    )
    await ReconcileManager().make(session, description)
    assert call_names(session.client) == ["get_web_property", "patch_web_property"]
    state = session.client.get_state()
    assert state["accounts"][0]["webProperties"][0]["name"] == "Renamed"


@pytest.mark.asyncio
async def test_web_property_by_id_only_not_patched():
    """Make sure a web property referenced only by id is not patched toward
    defaults it never declared
    """
    session = setup_session(
        state=remote_state(web_properties=[existing_property(industryVertical="ARTS")])
    )
    await ReconcileManager().make(
        session, {"accountId": TEST_ACCOUNT_ID, "webPropertyId": "UA-42-1"}
    )
    assert call_names(session.client) == ["get_web_property"]


@pytest.mark.asyncio
async def test_quota_user_in_context():
    """Make sure the session's quota user is attached to every call"""
    session = setup_session(quota_user="someone")
    await ReconcileManager().make(session, sample_description())
    assert {call[1].quota_user for call in session.client.calls} == {"someone"}


## Positional correlation ######################################################


def dimension_state(*dimensions):
    return remote_state(
        web_properties=[
            existing_property(
                customDimensions=[
                    dict(dim, id=f"dimension{i}", index=i)
                    for i, dim in enumerate(dimensions, start=1)
                ]
            )
        ]
    )


def dimensions_description(dimensions):
    return Description.from_dict(
        {
            "accountId": TEST_ACCOUNT_ID,
            "webPropertyId": "UA-42-1",
            "webProperty": existing_property(),
            "customDimensions": dimensions,
        }
    )


@pytest.mark.asyncio
async def test_positional_match_is_noop():
    """Make sure matching dimensions are left alone and take the remote id"""
    session = setup_session(state=dimension_state(*SAMPLE_DIMENSIONS))
    result = await ReconcileManager().make(
        session, dimensions_description(SAMPLE_DIMENSIONS)
    )
    assert mutation_names(session.client) == []
    assert [dim.id for dim in result.custom_dimensions] == ["dimension1", "dimension2"]


@pytest.mark.asyncio
async def test_positional_reorder_patches_by_position():
    """Make sure swapping two entries patches each position with the entry now
    at that position
    """
    session = setup_session(state=dimension_state(*SAMPLE_DIMENSIONS))
    swapped = list(reversed(SAMPLE_DIMENSIONS))
    result = await ReconcileManager().make(session, dimensions_description(swapped))

    patches = session.client.calls_to("patch_custom_dimension")
    assert [(ctx.resource_id, payload["name"]) for _, ctx, payload in patches] == [
        ("dimension1", "Date"),
        ("dimension2", "Position"),
    ]
    assert [(p["id"], p["index"]) for _, _, p in patches] == [
        ("dimension1", 1),
        ("dimension2", 2),
    ]
    assert mutation_names(session.client) == ["patch_custom_dimension"] * 2
    assert [dim.name for dim in result.custom_dimensions] == ["Date", "Position"]


@pytest.mark.asyncio
async def test_positional_append():
    """Make sure entries beyond the remote list are inserted at their position"""
    session = setup_session(state=dimension_state(SAMPLE_DIMENSIONS[0]))
    result = await ReconcileManager().make(
        session, dimensions_description(SAMPLE_DIMENSIONS)
    )
    assert mutation_names(session.client) == ["insert_custom_dimension"]
    _, _, payload = session.client.calls_to("insert_custom_dimension")[0]
    assert payload["id"] == "dimension2"
    assert payload["index"] == 2
    assert result.custom_dimensions[1].id == "dimension2"


@pytest.mark.asyncio
async def test_positional_patch_addresses_remote_id():
    """Make sure a patch addresses the remote entry by its own id"""
    state = remote_state(
        web_properties=[
            existing_property(
                customMetrics=[{"id": "ga:metric1", "index": 1, "name": "Old"}]
            )
        ]
    )
    session = setup_session(state=state)
    description = dimensions_description([])
    description.custom_metrics = [CustomMetric.from_resource(SAMPLE_METRICS[0])]
    result = await ReconcileManager().make(session, description)
    _, context, payload = session.client.calls_to("patch_custom_metric")[0]
    assert context.resource_id == "ga:metric1"
    assert payload["id"] == "metric1"
    assert result.custom_metrics[0].id == "ga:metric1"


@pytest.mark.asyncio
async def test_custom_correlation_strategy():
    """Make sure the id pattern follows the injected strategy"""
    session = setup_session()
    manager = ReconcileManager(
        metric_strategy=PositionalCorrelation("ga:metric{index}", set_index=True)
    )
    result = await manager.make(session, sample_description(views=[]))
    assert result.custom_metrics[0].id == "ga:metric1"


## Views and goals #############################################################


def view_state(views):
    return remote_state(web_properties=[existing_property(views=views)])


def views_description(views):
    return Description.from_dict(
        {
            "accountId": TEST_ACCOUNT_ID,
            "webProperty": existing_property(),
            "views": views,
        }
    )


@pytest.mark.asyncio
async def test_views_without_identity_not_listed():
    """Make sure views are only listed when one of them has an id or a key"""
    session = setup_session(state=view_state([]))
    await ReconcileManager().make(
        session, views_description([{"view": {"name": "a"}}, {"view": {"name": "b"}}])
    )
    assert call_names(session.client) == ["get_web_property", "insert_view", "insert_view"]


@pytest.mark.asyncio
async def test_views_listed_once():
    """Make sure the views are listed once for the whole stage"""
    session = setup_session(
        state=view_state(
            [{"id": "1", "name": "a", "type": "WEB"}, {"id": "2", "name": "b", "type": "WEB"}]
        )
    )
    result = await ReconcileManager().make(
        session,
        views_description(
            [
                {"view": {"name": "a", "uniqueKey": "name"}},
                {"profileId": "2", "view": {"name": "b"}},
                {"view": {"name": "c"}},
            ]
        ),
    )
    assert call_names(session.client) == ["get_web_property", "list_views", "insert_view"]
    assert [view.profile_id for view in result.views][:2] == ["1", "2"]
    assert result.views[2].profile_id is not None


@pytest.mark.asyncio
async def test_view_by_key_changed():
    session = setup_session(
        state=view_state([{"id": "1", "name": "a", "currency": "USD", "type": "WEB"}])
    )
    await ReconcileManager().make(
        session,
        views_description([{"view": {"name": "a", "currency": "EUR", "uniqueKey": "name"}}]),
    )
    _, context, payload = session.client.calls_to("patch_view")[0]
    assert context.profile_id == "1"
    assert payload["currency"] == "EUR"


@pytest.mark.asyncio
async def test_view_by_id_not_found():
    """Make sure a view that is not found by id is left alone along with its
    goals
    """
    session = setup_session(state=view_state([{"id": "1", "name": "a"}]))
    result = await ReconcileManager().make(
        session,
        views_description([{"profileId": "9", "view": {"name": "a"}, "goals": SAMPLE_GOALS}]),
    )
    assert call_names(session.client) == ["get_web_property", "list_views"]
    assert result.views[0].profile_id == "9"
    assert result.views[0].goals[0].id is None


@pytest.mark.asyncio
async def test_view_by_key_not_found():
    session = setup_session(state=view_state([]))
    result = await ReconcileManager().make(
        session,
        views_description(
            [{"view": {"name": "a", "uniqueKey": "name"}, "goals": SAMPLE_GOALS}]
        ),
    )
    assert call_names(session.client) == ["get_web_property", "list_views"]
    assert result.views[0].profile_id is None


@pytest.mark.asyncio
async def test_goals_positional():
    """Make sure goals of a resolved view are patched and inserted by position
    with plain integer ids
    """
    session = setup_session(
        state=view_state(
            [
                {
                    "id": "1",
                    "name": "a",
                    "type": "WEB",
                    "goals": [{"id": 1, "name": "Old", "active": True, "type": "EVENT"}],
                }
            ]
        )
    )
    goals = [
        {"name": "New", "active": True, "type": "EVENT"},
        {"name": "Second", "active": False, "type": "EVENT"},
    ]
    result = await ReconcileManager().make(
        session, views_description([{"profileId": "1", "view": {"name": "a"}, "goals": goals}])
    )
    assert mutation_names(session.client) == ["patch_goal", "insert_goal"]
    _, patch_context, _ = session.client.calls_to("patch_goal")[0]
    assert patch_context.profile_id == "1"
    assert patch_context.resource_id == 1
    assert [goal.id for goal in result.views[0].goals] == [1, 2]


@pytest.mark.asyncio
async def test_numeric_profile_id_is_idempotent():
    """Make sure a numeric profileId read from YAML matches the string id of the
    remote view and a second run changes nothing
    """
    description = yaml.safe_load(
        """
        accountId: 42
        webPropertyId: UA-42-1
        views:
          - profileId: 123456
            view:
              name: V
        """
    )
    session = setup_session(
        state=view_state([{"id": "123456", "name": "V", "type": "WEB"}])
    )
    result = await ReconcileManager().make(session, description)
    assert session.client.mutations == []
    assert result.views[0].profile_id == "123456"

    rerun = setup_session(state=session.client.get_state())
    await ReconcileManager().make(rerun, description)
    assert rerun.client.mutations == []


@pytest.mark.asyncio
async def test_goal_ids_differing_in_type_not_patched():
    """Make sure a declared integer goal id matches the string id returned by
    the remote side
    """
    goal = {"id": 1, "name": "Old", "active": True, "type": "EVENT"}
    session = setup_session(
        state=view_state(
            [{"id": "1", "name": "a", "type": "WEB", "goals": [{**goal, "id": "1"}]}]
        )
    )
    result = await ReconcileManager().make(
        session, views_description([{"profileId": 1, "view": {"name": "a"}, "goals": [goal]}])
    )
    assert session.client.mutations == []
    assert result.views[0].profile_id == "1"
    assert result.views[0].goals[0].id == "1"


@pytest.mark.asyncio
async def test_views_without_goals_skip_goal_listing():
    session = setup_session(state=view_state([]))
    await ReconcileManager().make(session, views_description([{"view": {"name": "a"}}]))
    assert "list_goals" not in call_names(session.client)


## Failures ####################################################################


@pytest.mark.asyncio
async def test_failure_propagates_with_progress():
    """Make sure a non-transient failure propagates unchanged and the progress
    keeps the ids assigned before the failure
    """
    session = setup_session()
    error = remote_error("insufficientPermissions")
    session.client.inject_error("insert_custom_dimension", error)
    manager = ReconcileManager(sleep=RecordingSleep())

    with pytest.raises(RemoteServiceError) as exc_info:
        await manager.make(session, sample_description())
    assert exc_info.value is error

    progress = manager.progress
    assert progress.web_property_id == "UA-42-1"
    assert progress.custom_metrics[0].id == "metric1"
    assert [dim.id for dim in progress.custom_dimensions] == [None, None]
    assert progress.views[0].profile_id is None
    assert "insert_view" not in call_names(session.client)


@pytest.mark.asyncio
async def test_progress_within_a_stage():
    """Make sure entries completed within a failing stage are kept"""
    session = setup_session(
        client=MockManagementClient(
            fail_on={
                "insert_custom_dimension": FailOnce(
                    remote_error("insufficientPermissions"), fail_number=2
                )
            }
        )
    )
    manager = ReconcileManager()
    with pytest.raises(RemoteServiceError):
        await manager.make(session, sample_description())
    assert [dim.id for dim in manager.progress.custom_dimensions] == [
        "dimension1",
        None,
    ]
    assert session.client.insert_custom_dimension.await_count == 2


@pytest.mark.asyncio
async def test_transient_errors_retried():
    """Make sure transient errors are absorbed by the backoff on every call"""
    session = setup_session()
    session.client.inject_error(
        "insert_web_property", remote_error("rateLimitExceeded"), count=2
    )
    session.client.inject_error("list_goals", remote_error("backendError"))
    sleep = RecordingSleep()
    result = await ReconcileManager(sleep=sleep).make(session, sample_description())
    assert result.web_property_id == "UA-42-1"
    assert sleep.delays_ms == [100, 200, 100]
    assert len(session.client.calls_to("insert_web_property")) == 3


@pytest.mark.asyncio
async def test_transient_errors_exhausted():
    session = setup_session()
    errors = [remote_error("quotaExceeded") for _ in range(10)]
    for error in errors:
        session.client.inject_error("insert_web_property", error)
    with pytest.raises(RemoteServiceError) as exc_info:
        await ReconcileManager(sleep=RecordingSleep()).make(
            session, sample_description()
        )
    assert exc_info.value is errors[-1]
    assert len(session.client.calls_to("insert_web_property")) == 10


@pytest.mark.asyncio
async def test_safe_make_success():
    session = setup_session()
    result = await ReconcileManager().safe_make(session, sample_description())
    assert isinstance(result, ReconciliationResult)
    assert result.success
    assert result.description.web_property_id == "UA-42-1"


@pytest.mark.asyncio
async def test_safe_make_failure():
    """Make sure safe_make wraps the error and returns the partial tree"""
    session = setup_session(
        client=MockManagementClient(
            fail_on={"insert_view": remote_error("insufficientPermissions")}
        )
    )
    result = await ReconcileManager().safe_make(session, sample_description())
    assert not result.success
    assert isinstance(result.exception, GenericServiceError)
    assert isinstance(result.exception.cause, RemoteServiceError)
    assert result.exception.status_code == 403
    assert result.description.custom_dimensions[1].id == "dimension2"


@pytest.mark.asyncio
async def test_safe_make_precondition():
    session = setup_session()
    result = await ReconcileManager().safe_make(session, Description())
    assert result.exception.status_code == 412
    assert result.description is None


## Stages ######################################################################


@pytest.mark.asyncio
async def test_stage_runs_alone():
    """Make sure a single stage can be run on a resolved snapshot"""
    session = setup_session(state=remote_state(web_properties=[existing_property()]))
    snapshot = (
        DescriptionBuilder()
        .account(id=TEST_ACCOUNT_ID)
        .web_property(existing_property())
        .custom_metrics(SAMPLE_METRICS)
        .build()
    )
    result = await ReconcileManager().reconcile_custom_metrics(session, snapshot)
    assert call_names(session.client) == ["list_custom_metrics", "insert_custom_metric"]
    assert result.custom_metrics[0].id == "metric1"
    assert snapshot.custom_metrics[0].id is None


@pytest.mark.asyncio
async def test_stage_without_web_property_id():
    session = setup_session()
    snapshot = Description(
        account_id=TEST_ACCOUNT_ID,
        web_property=WebProperty(name="p"),
        views=[ViewDescription(view=View(name="v"))],
    )
    assert await ReconcileManager().reconcile_views(session, snapshot) is snapshot
    assert session.client.calls == []


@pytest.mark.asyncio
async def test_reconcile_with_plain_dry_run_client():
    """Make sure the reconciler works with the unmocked dry run client"""
    session = setup_session(client=DryRunManagementClient())
    result = await ReconcileManager().make(session, sample_description())
    state = session.client.get_state()
    prop = state["accounts"][0]["webProperties"][0]
    assert prop["id"] == result.web_property_id
    assert len(prop["customDimensions"]) == 2
    assert prop["views"][0]["goals"][0]["name"] == "ConAB"


## Helpers #####################################################################


def test_find_by_key():
    resources = [{"id": 1, "name": "a"}, {"id": "2", "name": "b"}]
    assert find_by_key(resources, "name", "b") == {"id": "2", "name": "b"}
    assert find_by_key(resources, "id", "1") == {"id": 1, "name": "a"}
    assert find_by_key(resources, "name", "c") is None
    assert find_by_key(resources, "name", None) is None
    assert find_by_key(None, "name", "a") is None
