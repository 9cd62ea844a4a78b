"""
Overrides for each managed resource kind. Importing this package registers
every kind below.
"""

# Local
from .base import (
    ResourceOverrideBase,
    get_override_class,
    register_override,
    registered_kinds,
)
from .deployment import DeploymentOverride
from .pvc import PVCOverride
from .service import ServiceOverride
from .service_account import ServiceAccountOverride
