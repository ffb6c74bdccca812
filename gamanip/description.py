"""
The description tree is the declarative desired state of an analytics account.
Each resource kind is a value type with a fixed set of fields that map onto the
camelCase fields of the management API resources. Unknown fields are dropped
silently when a value type is read from a resource dict; nothing is validated.

The DescriptionBuilder assembles a tree incrementally:

    builder = DescriptionBuilder()
    builder.account(id=1234)
    builder.web_property(name="NewAcc", websiteUrl="http://someUrl")
    builder.view({"name": "New View", "websiteUrl": "http://someUrl"})
    description = builder.build()
"""

# Standard
from dataclasses import dataclass, field, fields, replace
from typing import Any, ClassVar, Dict, List, Optional, Union
import copy
import json

# First Party
import alog

# Local
from . import constants
from .utils import prune_none

log = alog.use_channel("DESCR")

# Metadata keys for resource fields
_API_KEY = "api_key"
_LOCAL = "local"


def _api_field(api_key: str, default: Any = None, local: bool = False):
    """Declare a value type field along with the API resource key it maps to.
    Local fields are kept in the description but never sent to the remote API.
    """
    return field(default=default, metadata={_API_KEY: api_key, _LOCAL: local})


## Resource value types ########################################################


class ApiResource:
    """Shared conversion between value types and API resource dicts"""

    # Map from alternate resource keys to the canonical key
    ALIASES: ClassVar[Dict[str, str]] = {}

    @classmethod
    def from_resource(
        cls,
        resource: Optional[Union[dict, "ApiResource"]] = None,
        **overrides,
    ):
        """Construct from a resource dict (camelCase keys). Keys that are not
        part of this kind are dropped and defaults are applied for any field
        that is missing or None.
        """
        if isinstance(resource, cls):
            resource = resource.to_resource(include_local=True)
        resource = {**(resource or {}), **overrides}
        for alias, key in cls.ALIASES.items():
            if resource.get(key) is None and resource.get(alias) is not None:
                resource[key] = resource[alias]
        kwargs = {}
        for fld in fields(cls):
            value = resource.get(fld.metadata[_API_KEY])
            if value is not None:
                kwargs[fld.name] = copy.deepcopy(value)
        dropped = set(resource) - {fld.metadata[_API_KEY] for fld in fields(cls)}
        dropped -= set(cls.ALIASES)
        if dropped:
            log.debug3("Dropping unknown %s fields: %s", cls.__name__, sorted(dropped))
        return cls(**kwargs)

    def to_resource(self, include_local: bool = False) -> dict:
        """Render as an API resource dict, omitting unset fields

        Args:
            include_local:  bool
                If True, local-only fields such as uniqueKey are included

        Returns:
            resource:  dict
                The camelCase resource
        """
        resource = {}
        for fld in fields(self):
            if fld.metadata[_LOCAL] and not include_local:
                continue
            value = getattr(self, fld.name)
            if value is not None:
                resource[fld.metadata[_API_KEY]] = prune_none(copy.deepcopy(value))
        return resource

    def unique_value(self) -> Any:
        """The value of the field named by unique_key, if there is one"""
        unique_key = getattr(self, "unique_key", None)
        if unique_key is None:
            return None
        return self.to_resource(include_local=True).get(unique_key)


@dataclass
class WebProperty(ApiResource):
    """A web property of the account"""

    ALIASES: ClassVar[Dict[str, str]] = {"webPropertyId": "id"}

    id: Optional[str] = _api_field("id")
    name: Optional[str] = _api_field("name")
    website_url: Optional[str] = _api_field("websiteUrl")
    industry_vertical: Optional[str] = _api_field(
        "industryVertical", constants.DEFAULT_INDUSTRY_VERTICAL
    )
    unique_key: Optional[str] = _api_field("uniqueKey", local=True)


@dataclass
class CustomDimension(ApiResource):
    """A custom dimension of the web property. Identity is positional."""

    id: Optional[str] = _api_field("id")
    index: Optional[int] = _api_field("index")
    name: Optional[str] = _api_field("name")
    scope: Optional[str] = _api_field("scope")
    active: Optional[bool] = _api_field("active")


@dataclass
class CustomMetric(ApiResource):
    """A custom metric of the web property. Identity is positional."""

    id: Optional[str] = _api_field("id")
    index: Optional[int] = _api_field("index")
    name: Optional[str] = _api_field("name")
    scope: Optional[str] = _api_field("scope")
    active: Optional[bool] = _api_field("active")
    type: Optional[str] = _api_field("type")


@dataclass
class View(ApiResource):
    """A view (profile) of the web property"""

    ALIASES: ClassVar[Dict[str, str]] = {"profileId": "id"}

    id: Optional[str] = _api_field("id")
    name: Optional[str] = _api_field("name")
    currency: Optional[str] = _api_field("currency")
    timezone: Optional[str] = _api_field("timezone")
    website_url: Optional[str] = _api_field("websiteUrl")
    type: Optional[str] = _api_field("type", constants.DEFAULT_VIEW_TYPE)
    e_commerce_tracking: Optional[bool] = _api_field("eCommerceTracking")
    unique_key: Optional[str] = _api_field("uniqueKey", local=True)


@dataclass
class Goal(ApiResource):
    """A goal of a view. Identity is positional with plain integer ids."""

    id: Optional[int] = _api_field("id")
    name: Optional[str] = _api_field("name")
    active: Optional[bool] = _api_field("active")
    type: Optional[str] = _api_field("type")
    value: Optional[float] = _api_field("value")
    url_destination_details: Optional[dict] = _api_field("urlDestinationDetails")
    visit_time_on_site_details: Optional[dict] = _api_field("visitTimeOnSiteDetails")
    visit_num_pages_details: Optional[dict] = _api_field("visitNumPagesDetails")
    event_details: Optional[dict] = _api_field("eventDetails")


@dataclass
class Filter(ApiResource):
    """A filter of a view. Filters are described but not synchronized."""

    name: Optional[str] = _api_field("name")
    type: Optional[str] = _api_field("type")
    include_details: Optional[dict] = _api_field("includeDetails")
    exclude_details: Optional[dict] = _api_field("excludeDetails")
    unique_key: Optional[str] = _api_field("uniqueKey", local=True)


## Tree ########################################################################


@dataclass
class ViewDescription:
    """A view together with its goals and filters"""

    view: View = field(default_factory=View)
    goals: List[Goal] = field(default_factory=list)
    filters: List[Filter] = field(default_factory=list)

    @property
    def profile_id(self) -> Optional[str]:
        return self.view.id

    def to_dict(self) -> dict:
        out = {"view": self.view.to_resource(include_local=True)}
        if self.view.id is not None:
            out["profileId"] = self.view.id
        out["goals"] = [goal.to_resource() for goal in self.goals]
        out["filters"] = [filt.to_resource(include_local=True) for filt in self.filters]
        return out

    @classmethod
    def from_dict(cls, data: dict) -> "ViewDescription":
        view = View.from_resource(data.get("view"))
        if view.id is None and data.get("profileId") is not None:
            view = replace(view, id=data["profileId"])
        return cls(
            view=view,
            goals=[Goal.from_resource(goal) for goal in data.get("goals") or []],
            filters=[Filter.from_resource(filt) for filt in data.get("filters") or []],
        )


@dataclass
class Description:
    """The full desired state of one account.

    The custom_dimensions and custom_metrics lists are None when they were
    never declared.
    """

    account_id: Optional[Union[str, int]] = None
    web_property: Optional[WebProperty] = None
    custom_dimensions: Optional[List[CustomDimension]] = None
    custom_metrics: Optional[List[CustomMetric]] = None
    views: List[ViewDescription] = field(default_factory=list)

    @property
    def web_property_id(self) -> Optional[str]:
        return self.web_property.id if self.web_property else None

    def to_dict(self) -> dict:
        """Serializable camelCase snapshot of the tree"""
        out = {}
        if self.account_id is not None:
            out["accountId"] = self.account_id
        if self.web_property is not None:
            out["webProperty"] = self.web_property.to_resource(include_local=True)
            if self.web_property.id is not None:
                out["webPropertyId"] = self.web_property.id
        if self.custom_dimensions is not None:
            out["customDimensions"] = [
                dimension.to_resource() for dimension in self.custom_dimensions
            ]
        if self.custom_metrics is not None:
            out["customMetrics"] = [metric.to_resource() for metric in self.custom_metrics]
        out["views"] = [view.to_dict() for view in self.views]
        return out

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Description":
        """Read a tree from its serialized shape"""
        data = data or {}
        web_property = None
        body = data.get("webProperty")
        if body and set(body) - {"id", "webPropertyId"}:
            web_property = WebProperty.from_resource(body)
        elif body or data.get("webPropertyId"):
            # A property referenced only by id declares no fields, defaults
            # included
            web_property = WebProperty(
                id=(body or {}).get("id") or (body or {}).get("webPropertyId"),
                industry_vertical=None,
            )
        if web_property is not None:
            if web_property.id is None and data.get("webPropertyId") is not None:
                web_property = replace(web_property, id=data["webPropertyId"])
        custom_dimensions = data.get("customDimensions")
        custom_metrics = data.get("customMetrics")
        return cls(
            account_id=data.get("accountId"),
            web_property=web_property,
            custom_dimensions=None
            if custom_dimensions is None
            else [CustomDimension.from_resource(dim) for dim in custom_dimensions],
            custom_metrics=None
            if custom_metrics is None
            else [CustomMetric.from_resource(metric) for metric in custom_metrics],
            views=[ViewDescription.from_dict(view) for view in data.get("views") or []],
        )


## Builder #####################################################################


class DescriptionBuilder:
    """Incremental construction of a Description. Every call shapes its input
    to the whitelisted fields of the resource kind and applies defaults.
    """

    def __init__(self, description: Optional[Union[Description, dict]] = None):
        if isinstance(description, dict):
            description = Description.from_dict(description)
        self._description = copy.deepcopy(description) if description else Description()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DescriptionBuilder":
        return cls(Description.from_dict(data))

    def account(self, resource: Optional[dict] = None, **fields_) -> "DescriptionBuilder":
        """Set the account id from either id or accountId"""
        resource = {**(resource or {}), **fields_}
        account_id = resource.get("id")
        if account_id is None:
            account_id = resource.get("accountId")
        self._description.account_id = account_id
        return self

    def web_property(
        self, resource: Optional[dict] = None, **fields_
    ) -> "DescriptionBuilder":
        """Set the web property"""
        self._description.web_property = WebProperty.from_resource(resource, **fields_)
        return self

    def view(
        self,
        view: Optional[Union[dict, View]] = None,
        goals: Optional[List[dict]] = None,
        filters: Optional[List[dict]] = None,
    ) -> "DescriptionBuilder":
        """Append a view together with its goals and filters"""
        self._description.views.append(
            ViewDescription(
                view=View.from_resource(view),
                goals=[Goal.from_resource(goal) for goal in goals or []],
                filters=[Filter.from_resource(filt) for filt in filters or []],
            )
        )
        return self

    def custom_dimensions(
        self, dimensions: Optional[List[dict]] = None
    ) -> "DescriptionBuilder":
        """Set the custom dimension list"""
        self._description.custom_dimensions = [
            CustomDimension.from_resource(
                dimension, id=None, index=None
            )
            for dimension in dimensions or []
        ]
        return self

    def custom_metrics(self, metrics: Optional[List[dict]] = None) -> "DescriptionBuilder":
        """Set the custom metric list"""
        self._description.custom_metrics = [
            CustomMetric.from_resource(metric, id=None, index=None)
            for metric in metrics or []
        ]
        return self

    def build(self) -> Description:
        """Snapshot of the tree built so far"""
        return copy.deepcopy(self._description)

    def to_dict(self) -> dict:
        return self._description.to_dict()

    def __str__(self) -> str:
        return self._description.to_json()
