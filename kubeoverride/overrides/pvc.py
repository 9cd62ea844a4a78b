"""
Override for PersistentVolumeClaims
"""

# Local
from .. import constants, fields
from ..action import Action
from ..exceptions import assert_required
from ..quantity import Quantity
from ..utils import nested_get
from .base import ResourceOverrideBase, register_override


@register_override
class PVCOverride(ResourceOverrideBase):
    """Sets storage class, capacity and topology labels on a PVC from
    storage.<component> in the spec. The storage class of a claim cannot change
    once it exists, so it is only set on create.
    """

    KIND = "PersistentVolumeClaim"
    FIELDS = {
        Action.CREATE: (
            fields.set_storage_class,
            fields.set_storage_request,
            fields.set_topology_labels,
        ),
        Action.UPDATE: (
            fields.set_storage_request,
            fields.set_topology_labels,
        ),
    }
    IMMUTABLE_FIELDS = ("spec.storageClassName",)

    def prepare(self, spec, action):
        storage = self.component_section(spec, constants.SPEC_STORAGE, required=True)
        size = storage.get(constants.SPEC_STORAGE_SIZE)
        assert_required(
            size is not None,
            f"{constants.SPEC_STORAGE}.{self.component}.{constants.SPEC_STORAGE_SIZE}",
        )
        values = self.topology_values(spec)
        values["storage_request"] = Quantity.parse(size)
        values["storage_class"] = storage.get(constants.SPEC_STORAGE_CLASS) or ""
        return values

    def verify(self, resource):
        """The storage request is re-parsed so that a patched value must still
        be a valid quantity, and it is kept in canonical form
        """
        super().verify(resource)
        requests = nested_get(resource, "spec.resources.requests") or {}
        if constants.STORAGE_RESOURCE in requests:
            requests[constants.STORAGE_RESOURCE] = str(
                Quantity.parse(requests[constants.STORAGE_RESOURCE])
            )
