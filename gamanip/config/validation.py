"""
Typed validation of the values in a loaded config. Each leaf of the validation
file that carries a "type" key is turned into a validator for the config value
found at the same nested key.
"""

# Standard
from typing import Any, Callable, Dict, List, Optional
import builtins

# First Party
import aconfig
import alog

# Local
from .. import constants
from ..utils import nested_get

log = alog.use_channel("CONFG")

# Validator signature: (value, **param_args) -> bool
VALIDATOR = Callable[..., bool]

_validators: Dict[str, VALIDATOR] = {}
_valid_types: Dict[str, tuple] = {}


def get_invalid_params(
    config: aconfig.Config,
    validation_config: aconfig.Config,
) -> List[str]:
    """Get the nested keys of all config values that fail validation

    Args:
        config:  aconfig.Config
            The parsed config with any override values
        validation_config:  aconfig.Config
            The parallel config holding the validation setup

    Returns:
        invalid_params:  List[str]
            Nested "foo.bar" keys for every value that failed validation
    """
    invalid_params = []
    for key, param_args in _parse_validation_config(validation_config).items():
        if not validate(nested_get(config, key), **param_args):
            log.warning("Found invalid config key [%s]", key)
            invalid_params.append(key)
    return invalid_params


def validate(value: Any, type: str, optional: bool = False, **kwargs) -> bool:
    """Validate a single value against a parameter description

    Args:
        value:  Any
            The value read from the config
        type:  str
            The parameter type key (int, float, number, str, bool, enum, list)
        optional:  bool
            If True, None is a valid value

    Returns:
        valid:  bool
            True if the value passes type and value validation
    """
    # pylint: disable=redefined-builtin
    if type not in _validators:
        raise ValueError(f"Unknown parameter type: {type}")
    if value is None and optional:
        return True
    valid_types = _valid_types[type]
    if not isinstance(value, valid_types) or (
        isinstance(value, bool) and bool not in valid_types
    ):
        log.warning("Invalid type <%s> for %s parameter", builtins.type(value), type)
        return False
    valid = _validators[type](value, **kwargs)
    if not valid:
        log.warning("Invalid value [%s]", value)
    return valid


## Validators ##################################################################


def _validator(type_key: str, *valid_types: type):
    """Register a value validator for the given type key"""

    def decorator(func: VALIDATOR) -> VALIDATOR:
        _validators[type_key] = func
        _valid_types[type_key] = valid_types
        return func

    return decorator


def _in_bounds(value, lower, upper) -> bool:
    return (lower is None or value >= lower) and (upper is None or value <= upper)


@_validator("number", int, float)
@_validator("int", int)
@_validator("float", float)
def _validate_number(value, min=None, max=None) -> bool:
    # pylint: disable=redefined-builtin
    return _in_bounds(value, min, max)


@_validator("str", str)
def _validate_str(value, min_len=None, max_len=None) -> bool:
    return _in_bounds(len(value), min_len, max_len)


@_validator("bool", bool)
def _validate_bool(_) -> bool:
    return True


@_validator("enum", str, int, builtins.type(None))
def _validate_enum(value, values: List[Any]) -> bool:
    assert isinstance(values, list) and values, "Must specify at least one enum value!"
    return value in values


@_validator("list", list)
def _validate_list(
    value,
    min_len: Optional[int] = None,
    max_len: Optional[int] = None,
    item_type: Optional[str] = None,
) -> bool:
    if not _in_bounds(len(value), min_len, max_len):
        return False
    if item_type is None:
        return True
    assert hasattr(builtins, item_type), f"Unsupported item_type: {item_type}"
    return all(isinstance(item, getattr(builtins, item_type)) for item in value)


## Parsing #####################################################################


def _parse_validation_config(
    validation_config: dict,
    prefix_parts: Optional[List[str]] = None,
) -> Dict[str, dict]:
    """Recursively flatten the validation config into nested keys pointing at
    the parameter args for that key
    """
    output = {}
    prefix_parts = prefix_parts or []
    for key, val in validation_config.items():
        assert isinstance(key, str), "Only string keys allowed!"
        if not isinstance(val, dict):
            continue
        key_parts = prefix_parts + [key]
        nested_key = constants.NESTED_DICT_DELIM.join(key_parts)
        if isinstance(val.get("type"), str) and val["type"] in _validators:
            log.debug3("Found parameter at %s", nested_key)
            output[nested_key] = dict(val)
        else:
            log.debug3("Recursing into %s", nested_key)
            output.update(_parse_validation_config(val, prefix_parts=key_parts))
    return output
