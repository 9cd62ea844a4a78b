"""
Override for Deployments
"""

# Local
from .. import constants, fields
from ..action import Action
from ..exceptions import assert_valid_value
from ..quantity import Quantity
from ..utils import nested_get, pod_containers
from .base import ResourceOverrideBase, register_override


@register_override
class DeploymentOverride(ResourceOverrideBase):
    """Sets replicas, container images and resources, pull secrets and
    zone/region placement on a Deployment.

    Placement (node affinity, topology labels) and pull secrets are fixed when
    the Deployment is created. Images, resources and replicas may be changed on
    update.
    """

    KIND = "Deployment"
    FIELDS = {
        Action.CREATE: (
            fields.set_image_pull_secrets,
            fields.set_replicas,
            fields.set_container_images,
            fields.set_container_resources,
            fields.set_topology_affinity,
            fields.set_topology_labels,
            fields.set_pod_topology_labels,
        ),
        Action.UPDATE: (
            fields.set_replicas,
            fields.set_container_images,
            fields.set_container_resources,
        ),
    }
    IMMUTABLE_FIELDS = ("spec.selector",)

    def prepare(self, spec, action):
        values = self.topology_values(spec)

        replicas = spec.get(constants.SPEC_REPLICAS)
        if replicas is not None:
            assert_valid_value(
                isinstance(replicas, int)
                and not isinstance(replicas, bool)
                and replicas >= 0,
                constants.SPEC_REPLICAS,
                replicas,
            )
        values["replicas"] = replicas

        images = spec.get(constants.SPEC_IMAGES) or {}
        for container, image in images.items():
            assert_valid_value(
                isinstance(image, str) and bool(image),
                f"{constants.SPEC_IMAGES}.{container}",
                image,
            )
        values["images"] = dict(images)

        values["resources"] = {
            container: self.parse_requirements(requirements)
            for container, requirements in (
                spec.get(constants.SPEC_RESOURCES) or {}
            ).items()
        }

        values["image_pull_secrets"] = self.pull_secret_names(spec)
        return values

    def verify(self, resource):
        super().verify(resource)
        self.verify_topology_labels(resource, "spec.template.metadata.labels")
        pod_spec = nested_get(resource, "spec.template.spec") or {}
        for container in pod_containers(pod_spec):
            for section in ("requests", "limits"):
                quantities = nested_get(container, f"resources.{section}") or {}
                for qty in quantities.values():
                    # Manifests may carry plain numbers (e.g. cpu: 1)
                    if isinstance(qty, (int, float)) and not isinstance(qty, bool):
                        qty = str(qty)
                    Quantity.parse(qty)
