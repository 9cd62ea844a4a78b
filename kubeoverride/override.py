"""
The Override class is the entrypoint for customizing loaded resource templates
with values from a CR spec before they are applied to the cluster.
"""

# Standard
from typing import Mapping, Union

# First Party
import alog

# Local
from . import config
from .action import Action
from .exceptions import UnsupportedKindError
from .overrides import (
    DeploymentOverride,
    PVCOverride,
    ServiceAccountOverride,
    ServiceOverride,
    get_override_class,
)
from .utils import nested_get

log = alog.use_channel("OVRD")


class Override:
    """An Override customizes the resources owned by a single component of the
    CR (e.g. the "orderer" in spec.storage.orderer). There is one method per
    managed resource kind, all with the signature (spec, resource, action).
    Each mutates the resource in place and raises on the first error.
    """

    def __init__(self, component: str):
        """Construct with the name of the component whose sections of the CR
        spec the overrides read
        """
        self.component = component

    def apply(
        self,
        spec: Mapping,
        resource: dict,
        action: Union[Action, str],
    ):
        """Apply the registered override for the resource's kind

        Args:
            spec:  Mapping
                The spec section of the CR
            resource:  dict
                The loaded resource template. It is mutated in place.
            action:  Union[Action, str]
                The lifecycle action the resource is being prepared for

        Raises:
            UnsupportedKindError: If no override is registered for the kind and
                strict_kinds is configured
        """
        kind = resource.get("kind")
        override_class = get_override_class(kind)
        if override_class is None:
            if config.strict_kinds:
                raise UnsupportedKindError(kind)
            log.warning(
                "No override registered for %s/%s. Leaving it unchanged.",
                kind,
                nested_get(resource, "metadata.name"),
            )
            return
        override_class(self.component).apply(spec, resource, action)

    ## Per-Kind Overrides ######################################################

    def pvc(self, spec: Mapping, pvc: dict, action: Union[Action, str]):
        """Override a PersistentVolumeClaim"""
        PVCOverride(self.component).apply(spec, pvc, action)

    def service(self, spec: Mapping, service: dict, action: Union[Action, str]):
        """Override a Service"""
        ServiceOverride(self.component).apply(spec, service, action)

    def deployment(self, spec: Mapping, deployment: dict, action: Union[Action, str]):
        """Override a Deployment"""
        DeploymentOverride(self.component).apply(spec, deployment, action)

    def service_account(
        self, spec: Mapping, service_account: dict, action: Union[Action, str]
    ):
        """Override a ServiceAccount"""
        ServiceAccountOverride(self.component).apply(spec, service_account, action)
