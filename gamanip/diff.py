"""
Structural comparison of a desired resource against its observed remote state
"""

# Standard
from collections.abc import Mapping
from typing import Any, Optional

# First Party
import alog

log = alog.use_channel("DIFF")


def requires_patch(observed: Optional[Mapping], desired: Optional[Mapping]) -> bool:
    """Decide whether the observed remote resource must be patched to reach the
    desired shape.

    Only the keys present in the desired shape are considered. Scalars are
    compared by equality, nested mappings are compared recursively and lists
    are compared by length only. Desired values of None are not considered.

    NOTE: The list rule is shallow. Changing the content of a list field
        without changing its length is not detected.

    Args:
        observed:  Optional[Mapping]
            The resource as returned by the remote API
        desired:  Optional[Mapping]
            The desired shape of the resource

    Returns:
        changed:  bool
            True if a patch is required
    """
    if desired is None:
        return False
    if not isinstance(observed, Mapping):
        observed = {}
    for key, desired_val in desired.items():
        if desired_val is None:
            continue
        observed_val = observed.get(key)
        if _value_differs(observed_val, desired_val):
            log.debug2(
                "Field [%s] differs: %s -> %s", key, observed_val, desired_val
            )
            return True
    return False


def _value_differs(observed_val: Any, desired_val: Any) -> bool:
    if isinstance(desired_val, Mapping):
        return requires_patch(observed_val, desired_val)
    if isinstance(desired_val, (list, tuple)):
        return not isinstance(observed_val, (list, tuple)) or len(observed_val) != len(
            desired_val
        )
    return observed_val != desired_val
