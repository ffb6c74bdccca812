"""
The management client is the abstraction in charge of talking to the remote
management API to list, get, insert and patch resources.
"""

# Local
from .base import ManagementClientBase, OperationResult, ResourceContext
from .dry_run_management_client import DryRunManagementClient
