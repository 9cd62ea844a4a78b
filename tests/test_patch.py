"""
Test the resource patch selection and application
"""

# Third Party
import pytest

# First Party
import aconfig

# Local
from kubeoverride.exceptions import InvalidFieldValueError
from kubeoverride.patch import (
    JSON_PATCH_6902,
    STRATEGIC_MERGE_PATCH,
    apply_patches,
    select_patches,
)

## Helpers #####################################################################

FIELD = "resourcePatches.orderer"


def sample_pod(containers=None):
    return {
        "kind": "Pod",
        "apiVersion": "v1",
        "metadata": {"name": "foo"},
        "spec": {"containers": containers or []},
    }


def make_entry(patch_type, patch, kind="Pod"):
    return {"kind": kind, "patchType": patch_type, "patch": patch}


## select_patches ##############################################################


def test_select_by_kind():
    """Make sure only entries for the given kind are selected, in order"""
    entries = [
        make_entry(JSON_PATCH_6902, [], kind="Service"),
        make_entry(STRATEGIC_MERGE_PATCH, {"a": 1}),
        make_entry(JSON_PATCH_6902, [{"op": "remove", "path": "/a"}]),
    ]
    selected = select_patches(FIELD, entries, "Pod")
    assert [entry["field"] for entry in selected] == [f"{FIELD}[1]", f"{FIELD}[2]"]
    assert selected[0]["patch"] == {"a": 1}


def test_select_converts_config():
    """Make sure patches from an aconfig spec become plain dicts"""
    entries = aconfig.Config(
        {"p": [make_entry(STRATEGIC_MERGE_PATCH, {"a": {"b": 1}})]},
        override_env_vars=False,
    ).p
    selected = select_patches(FIELD, entries, "Pod")
    assert type(selected[0]["patch"]) is dict
    assert type(selected[0]["patch"]["a"]) is dict


@pytest.mark.parametrize(
    "entries",
    [
        "not a list",
        [{"patchType": JSON_PATCH_6902, "patch": []}],
        [make_entry("patchUnknown", {})],
        [make_entry(JSON_PATCH_6902, {"op": "remove", "path": "/a"})],
        [make_entry(STRATEGIC_MERGE_PATCH, [])],
    ],
)
def test_select_malformed(entries):
    """Make sure malformed entries raise even if they target another kind"""
    with pytest.raises(InvalidFieldValueError):
        select_patches(FIELD, entries, "Other")


## apply_patches ###############################################################


def test_js6902_apply_patch():
    """Make sure a simple patchJson6902 patch applies cleanly"""
    obj = {"kind": "Foo", "key": "value", "nested": {"key": "nested_value"}}
    patches = select_patches(
        FIELD,
        [
            make_entry(
                JSON_PATCH_6902,
                [
                    {"op": "replace", "path": "/key", "value": "replaced"},
                    {"op": "replace", "path": "/nested/key", "value": "nested"},
                ],
                kind="Foo",
            )
        ],
        "Foo",
    )
    res = apply_patches(obj, patches)
    assert res["key"] == "replaced"
    assert res["nested"]["key"] == "nested"
    assert obj["key"] == "value"


def test_js6902_bad_path():
    """Make sure a JSON patch that does not fit the object raises a config
    error naming the entry
    """
    patches = select_patches(
        FIELD,
        [make_entry(JSON_PATCH_6902, [{"op": "remove", "path": "/missing"}])],
        "Pod",
    )
    with pytest.raises(InvalidFieldValueError) as err:
        apply_patches(sample_pod(), patches)
    assert err.value.field == f"{FIELD}[0]"


def test_psm_apply_patch():
    """Make sure a patchStrategicMerge patch applies cleanly"""
    obj = {
        "kind": "Deployment",
        "spec": {
            "template": {"spec": {"containers": [{"name": "foo", "image": "foo"}]}}
        },
    }
    patches = select_patches(
        FIELD,
        [
            make_entry(
                STRATEGIC_MERGE_PATCH,
                {
                    "spec": {
                        "template": {
                            "spec": {
                                "containers": [
                                    {"name": "foo", "imagePullPolicy": "Always"},
                                    {"name": "bar", "image": "bar"},
                                ]
                            }
                        }
                    }
                },
                kind="Deployment",
            )
        ],
        "Deployment",
    )
    res = apply_patches(obj, patches)
    assert res["spec"]["template"]["spec"]["containers"] == [
        {"name": "foo", "image": "foo", "imagePullPolicy": "Always"},
        {"name": "bar", "image": "bar"},
    ]


def test_patches_apply_in_order():
    """Make sure later patches see the result of earlier ones"""
    patches = select_patches(
        FIELD,
        [
            make_entry(STRATEGIC_MERGE_PATCH, {"metadata": {"labels": {"a": "1"}}}),
            make_entry(
                JSON_PATCH_6902,
                [{"op": "replace", "path": "/metadata/labels/a", "value": "2"}],
            ),
        ],
        "Pod",
    )
    assert apply_patches(sample_pod(), patches)["metadata"]["labels"] == {"a": "2"}
