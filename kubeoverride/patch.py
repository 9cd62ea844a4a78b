"""
This module holds the semantics for applying the raw resource patches a CR can
carry for a component (spec.resourcePatches.<component>). Patches run after the
typed field overrides, so they have the last word on any field they touch.
"""

# Standard
from typing import List, Mapping
import copy

# Third Party
from jsonpatch import JsonPatch, JsonPatchException
from jsonpointer import JsonPointerException

# First Party
import alog

# Local
from .exceptions import InvalidFieldValueError, assert_valid_value
from .patch_strategic_merge import patch_strategic_merge

log = alog.use_channel("PATCH")

## Public Interface ############################################################

STRATEGIC_MERGE_PATCH = "patchStrategicMerge"
JSON_PATCH_6902 = "patchJson6902"
PATCH_TYPES = [STRATEGIC_MERGE_PATCH, JSON_PATCH_6902]


def select_patches(field: str, patches: List[Mapping], kind: str) -> List[dict]:
    """Validate the shape of every patch entry and get the ones that target
    the given kind

    Args:
        field:  str
            The nested name of the spec field holding the patches (for errors)
        patches:  List[Mapping]
            The patch entries, each with kind, patchType and patch
        kind:  str
            The kind being overridden

    Returns:
        selected:  List[dict]
            Copies of the patch entries whose kind matches, in order

    Raises:
        InvalidFieldValueError: If any entry is malformed
    """
    assert_valid_value(isinstance(patches, list), field, patches)
    selected = []
    for i, entry in enumerate(patches):
        entry_field = f"{field}[{i}]"
        assert_valid_value(
            isinstance(entry, Mapping) and isinstance(entry.get("kind"), str),
            entry_field,
            entry,
            f"Patch entry {entry_field} must be a dict with a kind",
        )
        patch_type = entry.get("patchType")
        assert_valid_value(
            patch_type in PATCH_TYPES,
            f"{entry_field}.patchType",
            patch_type,
            f"Unsupported patch type [{patch_type}]",
        )
        body = entry.get("patch")
        if patch_type == JSON_PATCH_6902:
            assert_valid_value(
                isinstance(body, list),
                f"{entry_field}.patch",
                body,
                "Invalid JSON 6902 patch. Must be a list of operations.",
            )
        else:
            assert_valid_value(
                isinstance(body, Mapping),
                f"{entry_field}.patch",
                body,
                "Invalid strategic merge patch. Must be a dict.",
            )
        if entry["kind"] == kind:
            selected.append(
                {
                    "field": entry_field,
                    "patchType": patch_type,
                    "patch": copy.deepcopy(_plain(body)),
                }
            )
    return selected


def apply_patches(resource_definition: dict, patches: List[dict]) -> dict:
    """Apply the selected patches to the given resource in order

    Args:
        resource_definition:  dict
            The dict representation of the object to patch
        patches:  List[dict]
            The entries returned by select_patches

    Returns:
        patched_definition:  dict
            A patched copy of the resource definition

    Raises:
        InvalidFieldValueError: If a patch cannot be applied to this object
    """
    for entry in patches:
        log.debug3("Applying %s from %s", entry["patchType"], entry["field"])
        try:
            if entry["patchType"] == JSON_PATCH_6902:
                resource_definition = JsonPatch(entry["patch"]).apply(
                    resource_definition
                )
            else:
                resource_definition = patch_strategic_merge(
                    resource_definition, entry["patch"]
                )
        except (JsonPatchException, JsonPointerException, ValueError) as err:
            raise InvalidFieldValueError(
                entry["field"],
                entry["patch"],
                f"Failed to apply {entry['field']}: {err}",
            ) from err
    return resource_definition


## Implementation ##############################################################


def _plain(value):
    """Convert nested Mappings (e.g. aconfig.Config) to plain dicts"""
    if isinstance(value, Mapping):
        return {key: _plain(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_plain(val) for val in value]
    return value
