"""
Override for ServiceAccounts
"""

# Local
from .. import fields
from ..action import Action
from .base import ResourceOverrideBase, register_override


@register_override
class ServiceAccountOverride(ResourceOverrideBase):
    KIND = "ServiceAccount"
    FIELDS = {
        Action.CREATE: (fields.set_image_pull_secrets,),
        Action.UPDATE: (fields.set_image_pull_secrets,),
    }

    def prepare(self, spec, action):
        return {"image_pull_secrets": self.pull_secret_names(spec)}
