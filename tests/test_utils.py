"""
Tests for functions in kubeoverride.utils
"""

# Third Party
import pytest

# Local
from kubeoverride import utils

## nested_get ##################################################################


def test_nested_get_present():
    """Make sure nested values can be read"""
    assert utils.nested_get({"a": {"b": {"c": 1}}}, "a.b.c") == 1


def test_nested_get_missing():
    """Make sure missing and null intermediate dicts give the default"""
    assert utils.nested_get({"a": {}}, "a.b.c") is None
    assert utils.nested_get({"a": None}, "a.b", "dflt") == "dflt"


def test_nested_get_non_dict():
    """Make sure a non-dict intermediate raises"""
    with pytest.raises(TypeError):
        utils.nested_get({"a": [1]}, "a.b")


## nested_set / ensure_dict ####################################################


def test_nested_set_creates_intermediates():
    """Make sure missing and null intermediate dicts are created"""
    dct = {"a": None}
    utils.nested_set(dct, "a.b.c", 1)
    assert dct == {"a": {"b": {"c": 1}}}


def test_nested_set_top_level():
    """Make sure a key without nesting is set directly"""
    dct = {}
    utils.nested_set(dct, "a", 1)
    assert dct == {"a": 1}


def test_ensure_dict_existing():
    """Make sure an existing dict is returned, not replaced"""
    inner = {"x": 1}
    dct = {"a": inner}
    assert utils.ensure_dict(dct, "a") is inner


def test_ensure_dict_non_dict():
    """Make sure a non-dict in the path raises"""
    with pytest.raises(TypeError):
        utils.ensure_dict({"a": "str"}, "a.b")


## pod_containers ##############################################################


def test_pod_containers():
    """Make sure init containers are included only when asked"""
    pod_spec = {"containers": [{"name": "a"}], "initContainers": [{"name": "b"}]}
    assert [c["name"] for c in utils.pod_containers(pod_spec)] == ["a", "b"]
    assert [
        c["name"] for c in utils.pod_containers(pod_spec, include_init=False)
    ] == ["a"]
    assert utils.pod_containers({}) == []


## update_in_place #############################################################


def test_update_in_place_keeps_nested_identity():
    """Make sure nested dicts and lists held by the caller see the update"""
    labels = {"app": "x"}
    containers = [{"name": "a", "image": "old"}]
    container = containers[0]
    target = {
        "metadata": {"labels": labels},
        "spec": {"containers": containers},
    }
    source = {
        "metadata": {"labels": {"app": "x", "zone": "z"}},
        "spec": {"containers": [{"name": "a", "image": "new"}, {"name": "b"}]},
    }
    utils.update_in_place(target, source)
    assert target == source
    assert target["metadata"]["labels"] is labels
    assert labels == {"app": "x", "zone": "z"}
    assert target["spec"]["containers"] is containers
    assert container["image"] == "new"


def test_update_in_place_removes_and_replaces():
    """Make sure removed keys go away, shortened lists shrink and values of a
    different type are replaced
    """
    target = {"a": 1, "b": {"c": 2}, "d": [1, 2, 3], "e": {"f": 1}}
    source = {"b": "str", "d": [4], "e": {}}
    utils.update_in_place(target, source)
    assert target == source
