"""
This module implements Patch Strategic Merge following the semantics in:

* kustomize: https://kubectl.docs.kubernetes.io/references/kustomize/glossary/#patchstrategicmerge
* kubernetes: https://github.com/kubernetes/community/blob/master/contributors/devel/sig-api-machinery/strategic-merge-patch.md
"""  # pylint: disable=line-too-long

# Standard
from collections import OrderedDict
from typing import Any, Dict, Optional
import copy

# First Party
import alog

log = alog.use_channel("PATCH")

# Merge keys for the lists of the kinds that have overrides. Positions are the
# kind followed by the dict keys leading to the list. List nesting is not part
# of the position, so a container's env is under <...>.containers.env.
_POD_SPEC_MERGE_KEYS = {
    "containers": "name",
    "containers.env": "name",
    "containers.ports": "containerPort",
    "containers.volumeMounts": "mountPath",
    "initContainers": "name",
    "initContainers.env": "name",
    "initContainers.volumeMounts": "mountPath",
    "imagePullSecrets": "name",
    "volumes": "name",
}
MERGE_PATCH_KEYS = {
    **{
        f"Deployment.spec.template.spec.{path}": key
        for path, key in _POD_SPEC_MERGE_KEYS.items()
    },
    "Service.spec.ports": "port",
    "ServiceAccount.imagePullSecrets": "name",
    "ServiceAccount.secrets": "name",
}

## Public ######################################################################


def patch_strategic_merge(
    resource_definition: dict,
    patch: dict,
    merge_patch_keys: Optional[Dict[str, str]] = None,
) -> dict:
    """Apply a Strategic Merge Patch based on JSON Merge Patch (rfc 7386)

    Args:
        resource_definition:  dict
            The dict representation of the kubernetes resource
        patch:  dict
            The formatted patch to apply
        merge_patch_keys:  Optional[Dict[str, str]]
            The mapping from positions to the key used to align list elements.
            Lists without a merge key are replaced wholesale.

    Returns:
        patched_resource_definition:  dict
            A patched copy of resource_definition

    Raises:
        ValueError: If the patch cannot be applied
    """
    if merge_patch_keys is None:
        merge_patch_keys = MERGE_PATCH_KEYS
    return _merge(
        copy.deepcopy(resource_definition),
        copy.deepcopy(patch),
        resource_definition.get("kind"),
        merge_patch_keys,
    )


## Implementation ##############################################################

_DIRECTIVE_KEY = "$patch"
_DIRECTIVE_REPLACE = "replace"
_DIRECTIVE_MERGE = "merge"
_DIRECTIVE_DELETE = "delete"
_DIRECTIVE_DELETE_FROM_PRIMITIVE_LIST = "$deleteFromPrimitiveList/"


def _merge(current: Any, desired: Any, position: str, merge_keys: Dict[str, str]):
    if isinstance(desired, dict) and isinstance(current, dict):
        return _merge_dict(current, desired, position, merge_keys)
    if isinstance(desired, list) and isinstance(current, list):
        return _merge_list(current, desired, position, merge_keys)
    log.debug4("Overwriting at [%s]", position)
    return desired


def _merge_dict(current: dict, desired: dict, position: str, merge_keys: dict):
    log.debug4("Performing dict merge at [%s]", position)
    for key, val in desired.items():
        if val is None:
            current.pop(key, None)
        elif key.startswith(_DIRECTIVE_DELETE_FROM_PRIMITIVE_LIST):
            _delete_from_primitive_list(current, key.split("/", 1)[-1], val)
        elif key not in current:
            current[key] = val
        else:
            current[key] = _merge(current[key], val, f"{position}.{key}", merge_keys)
    return current


def _delete_from_primitive_list(current: dict, target_key: str, elements: Any):
    target = current.get(target_key)
    if not isinstance(target, list):
        raise ValueError(f"Cannot delete from unknown primitive list [{target_key}]")
    if not isinstance(elements, list):
        raise ValueError("Bad primitive list delete directive. Patch must be a list.")
    for element in elements:
        if element not in target:
            raise ValueError(
                f"Bad primitive list delete directive. Element [{element}] not found."
            )
        target.remove(element)


def _merge_list(current: list, desired: list, position: str, merge_keys: dict):
    merge_key = merge_keys.get(position)
    log.debug4("Performing list merge at [%s]. Merge key: %s", position, merge_key)
    if not merge_key:
        return desired

    for name, items in (("Current", current), ("Desired", desired)):
        if not all(isinstance(itm, dict) and merge_key in itm for itm in items):
            raise ValueError(
                f"{name} at [{position}] contains elements without [{merge_key}]"
            )

    # Align elements by their merge key and apply each element's directive
    aligned = OrderedDict((itm[merge_key], itm) for itm in current)
    for item in desired:
        item_key = item[merge_key]
        directive = item.pop(_DIRECTIVE_KEY, _DIRECTIVE_MERGE)
        if directive == _DIRECTIVE_DELETE:
            if item_key not in aligned:
                raise ValueError(
                    f"Invalid [{_DIRECTIVE_DELETE}] on missing element [{item_key}]"
                )
            del aligned[item_key]
        elif directive == _DIRECTIVE_REPLACE or item_key not in aligned:
            aligned[item_key] = item
        elif directive == _DIRECTIVE_MERGE:
            aligned[item_key] = _merge(aligned[item_key], item, position, merge_keys)
        else:
            raise ValueError(f"Invalid directive: [{directive}]")
    return list(aligned.values())
