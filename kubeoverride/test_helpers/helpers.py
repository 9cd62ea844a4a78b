"""
This module holds common helper functions for making testing easy
"""

# Standard
from contextlib import contextmanager
import copy
import os

# Third Party
import yaml

# First Party
import aconfig
import alog

# Local
from kubeoverride.config import library_config as config_detail_dict

log = alog.use_channel("TEST")


def configure_logging():
    alog.configure(
        os.environ.get("LOG_LEVEL", "off"),
        os.environ.get("LOG_FILTERS", ""),
        formatter="json"
        if os.environ.get("LOG_JSON", "").lower() == "true"
        else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


configure_logging()

TEST_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")

TEST_COMPONENT = "orderer"


def setup_spec(
    zone="zone1",
    region="region1",
    size="100m",
    storage_class="manual",
    component=TEST_COMPONENT,
    **kwargs,
):
    """Build a CR spec with the storage section for the given component. Any
    kwargs are merged in at the top level of the spec.
    """
    spec_dict = {
        "zone": zone,
        "region": region,
        "storage": {component: {"size": size, "class": storage_class}},
    }
    spec_dict.update(copy.deepcopy(kwargs))
    return aconfig.Config(spec_dict, override_env_vars=False)


def load_template(name: str) -> dict:
    """Load one of the test resource templates from the data dir"""
    with open(os.path.join(TEST_DATA_DIR, f"{name}.yaml"), encoding="utf-8") as handle:
        return yaml.safe_load(handle)


@contextmanager
def library_config(**config_overrides):
    """This context manager sets library config values temporarily and reverts
    them on completion
    """
    old_vals = {}
    for key, val in config_overrides.items():
        if key in config_detail_dict:
            old_vals[key] = config_detail_dict[key]
        if isinstance(val, dict):
            val = aconfig.Config(val, override_env_vars=False)
        config_detail_dict[key] = val

    try:
        yield
    finally:
        for key in config_overrides:
            if key in old_vals:
                config_detail_dict[key] = old_vals[key]
            else:
                del config_detail_dict[key]
