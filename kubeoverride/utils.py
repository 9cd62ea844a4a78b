"""
Common dict utilities shared across the overrides
"""

# Standard
from typing import Any, List, Mapping

# Local
from . import constants

# Sentinel for missing dict values
__MISSING__ = "__MISSING__"

## Dicts #######################################################################


def nested_get(dct: Mapping, key: str, dflt=None) -> Any:
    """Helper to get values from a dict using 'foo.bar' key notation

    Args:
        dct:  Mapping
            The dict to read from
        key:  str
            Key that may contain '.' notation indicating dict nesting
        dflt:  Any
            Value to return when the key is not found

    Returns:
        val:  Any
            Whatever is found at the given key or dflt if the key is not found.
            This includes missing (or null) intermediate dicts.
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    for i, part in enumerate(parts[:-1]):
        dct = dct.get(part, __MISSING__)
        if dct is __MISSING__ or dct is None:
            return dflt
        if not isinstance(dct, Mapping):
            raise TypeError(
                "Intermediate key {} is not a dict".format(  # pylint: disable=consider-using-f-string
                    constants.NESTED_DICT_DELIM.join(parts[: i + 1])
                )
            )
    return dct.get(parts[-1], dflt)


def nested_set(dct: dict, key: str, val: Any):
    """Helper to set values in a dict using 'foo.bar' key notation. Missing or
    null intermediate dicts are created.

    Args:
        dct:  dict
            The dict into which the key will be set
        key:  str
            Key that may contain '.' notation indicating dict nesting
        val:  Any
            The value to place at the nested key
    """
    parts = key.split(constants.NESTED_DICT_DELIM)
    dct = ensure_dict(dct, constants.NESTED_DICT_DELIM.join(parts[:-1]))
    dct[parts[-1]] = val


def ensure_dict(dct: dict, key: str) -> dict:
    """Get the dict at the given nested key, creating it (and any intermediate
    dicts) if it is absent or null. An empty key returns dct itself.
    """
    if not key:
        return dct
    for i, part in enumerate(key.split(constants.NESTED_DICT_DELIM)):
        if dct.get(part) is None:
            dct[part] = {}
        dct = dct[part]
        if not isinstance(dct, dict):
            raise TypeError(
                "Intermediate key {} is not a dict".format(  # pylint: disable=consider-using-f-string
                    constants.NESTED_DICT_DELIM.join(
                        key.split(constants.NESTED_DICT_DELIM)[: i + 1]
                    )
                )
            )
    return dct


def pod_containers(pod_spec: dict, include_init: bool = True) -> List[dict]:
    """Get all containers in a pod spec, optionally including init containers"""
    containers = list(pod_spec.get("containers") or [])
    if include_init:
        containers.extend(pod_spec.get("initContainers") or [])
    return containers


def update_in_place(target: dict, source: dict):
    """Make target equal to source while keeping the identity of every nested
    dict and list that exists in both, so references a caller holds into target
    see the new values.

    Args:
        target:  dict
            The object to update
        source:  dict
            The object holding the desired content. Nested values from source
            that have no counterpart in target are placed into target as is.
    """
    for key in [key for key in target if key not in source]:
        del target[key]
    for key, value in source.items():
        if key in target and _same_container(target[key], value):
            _sync(target[key], value)
        else:
            target[key] = value


## Implementation ##############################################################


def _same_container(current: Any, value: Any) -> bool:
    return (isinstance(current, dict) and isinstance(value, dict)) or (
        isinstance(current, list) and isinstance(value, list)
    )


def _sync(current: Any, value: Any):
    if isinstance(current, dict):
        update_in_place(current, value)
        return
    del current[len(value) :]
    for i, item in enumerate(value):
        if i >= len(current):
            current.append(item)
        elif _same_container(current[i], item):
            _sync(current[i], item)
        else:
            current[i] = item
