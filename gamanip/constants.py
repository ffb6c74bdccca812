"""
Shared module to hold constant values for the library
"""

# Delimiter used for nested dict keys
NESTED_DICT_DELIM = "."

# Default field values applied by the description value types
DEFAULT_INDUSTRY_VERTICAL = "UNSPECIFIED"
DEFAULT_VIEW_TYPE = "WEB"

# Status used for local precondition failures
PRECONDITION_FAILED_STATUS = 412

# Status used when an arbitrary error is wrapped without a known status
INTERNAL_ERROR_STATUS = 500

# Keys of the child collections in serialized remote state
CUSTOM_DIMENSIONS = "customDimensions"
CUSTOM_METRICS = "customMetrics"
GOALS = "goals"
