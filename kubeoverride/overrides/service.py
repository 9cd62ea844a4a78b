"""
Override for Services
"""

# Local
from .. import constants, fields
from ..action import Action
from ..exceptions import assert_valid_value
from .base import ResourceOverrideBase, register_override


@register_override
class ServiceOverride(ResourceOverrideBase):
    """Sets the service type and topology labels from the spec"""

    KIND = "Service"
    FIELDS = {
        Action.CREATE: (fields.set_service_type, fields.set_topology_labels),
        Action.UPDATE: (fields.set_service_type, fields.set_topology_labels),
    }
    IMMUTABLE_FIELDS = ("spec.clusterIP",)

    def prepare(self, spec, action):
        values = self.topology_values(spec)
        service_type = (spec.get(constants.SPEC_SERVICE) or {}).get("type")
        if service_type is not None:
            assert_valid_value(
                service_type in constants.SERVICE_TYPES,
                f"{constants.SPEC_SERVICE}.type",
                service_type,
                f"Service type must be one of {constants.SERVICE_TYPES}, "
                f"got {service_type!r}",
            )
        values["service_type"] = service_type
        return values
