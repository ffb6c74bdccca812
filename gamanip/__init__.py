"""
Package exports
"""

# Local
from . import config, reconcile
from .backoff import backoff
from .correlation import CorrelationStrategy, PositionalCorrelation
from .description import (
    CustomDimension,
    CustomMetric,
    Description,
    DescriptionBuilder,
    Filter,
    Goal,
    View,
    ViewDescription,
    WebProperty,
)
from .diff import requires_patch
from .exceptions import (
    GamanipError,
    GenericServiceError,
    RemoteServiceError,
    ValidationError,
    assert_precondition,
)
from .management_client import (
    DryRunManagementClient,
    ManagementClientBase,
    OperationResult,
    ResourceContext,
)
from .reconcile import ReconcileManager, ReconciliationResult, make
from .session import Session
