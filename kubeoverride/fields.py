"""
Field mappers copy values derived from a CR spec onto a resource definition.

Every mapper has the signature (resource, values) -> None where resource is the
dict definition of the object being overridden and values is the dict of
already-validated values prepared by the override for that kind. Mappers never
validate, never talk to the cluster, and are idempotent so that repeated
reconciliation with the same spec yields the same object.
"""

# Standard
from typing import List

# First Party
import alog

# Local
from . import config, constants
from .patch import apply_patches
from .utils import ensure_dict, pod_containers, update_in_place

log = alog.use_channel("FIELD")

## Storage #####################################################################


def set_storage_class(resource: dict, values: dict):
    """Set spec.storageClassName to the class from the spec verbatim"""
    storage_class = values.get("storage_class")
    log.debug2("Setting storageClassName to [%s]", storage_class)
    ensure_dict(resource, "spec")["storageClassName"] = storage_class


def set_storage_request(resource: dict, values: dict):
    """Replace spec.resources.requests with the single storage request"""
    quantity = values["storage_request"]
    log.debug2("Setting storage request to [%s]", quantity)
    ensure_dict(resource, "spec.resources")["requests"] = {
        constants.STORAGE_RESOURCE: str(quantity)
    }


## Topology ####################################################################


def _set_topology_labels(metadata: dict, values: dict):
    """Set the zone/region labels on a metadata dict. Empty values leave the
    corresponding label untouched.
    """
    for label, value in (
        (constants.ZONE_LABEL, values.get("zone")),
        (constants.REGION_LABEL, values.get("region")),
    ):
        if value:
            log.debug3("Setting label %s=%s", label, value)
            ensure_dict(metadata, "labels")[label] = value


def set_topology_labels(resource: dict, values: dict):
    """Set the zone/region labels on the object's own metadata"""
    _set_topology_labels(ensure_dict(resource, "metadata"), values)


def set_pod_topology_labels(resource: dict, values: dict):
    """Set the zone/region labels on a workload's pod template"""
    _set_topology_labels(ensure_dict(resource, "spec.template.metadata"), values)


def _upsert_match_expression(term: dict, key: str, value: str):
    expressions = term.get("matchExpressions") or []
    expression = {"key": key, "operator": "In", "values": [value]}
    for i, existing in enumerate(expressions):
        if existing.get("key") == key:
            expressions[i] = expression
            break
    else:
        expressions.append(expression)
    term["matchExpressions"] = expressions


def set_topology_affinity(resource: dict, values: dict):
    """Require the pod template to schedule onto nodes in the spec's zone and
    region. Each existing node selector term gets a matching expression, which
    replaces any expression already present for the same node label key.
    """
    topology = [
        (config.affinity.zone_key, values.get("zone")),
        (config.affinity.region_key, values.get("region")),
    ]
    topology = [(key, value) for key, value in topology if value]
    if not topology:
        return

    required = ensure_dict(
        resource,
        "spec.template.spec.affinity.nodeAffinity."
        "requiredDuringSchedulingIgnoredDuringExecution",
    )
    terms = required.get("nodeSelectorTerms") or [{}]
    for term in terms:
        for key, value in topology:
            _upsert_match_expression(term, key, value)
    required["nodeSelectorTerms"] = terms
    log.debug3("Node selector terms: %s", terms)


## Workloads ###################################################################


def set_replicas(resource: dict, values: dict):
    """Set spec.replicas if the spec gives one"""
    replicas = values.get("replicas")
    if replicas is not None:
        log.debug2("Setting replicas to %d", replicas)
        ensure_dict(resource, "spec")["replicas"] = replicas


def _named_containers(resource: dict) -> dict:
    pod_spec = ensure_dict(resource, "spec.template.spec")
    return {
        container.get("name"): container for container in pod_containers(pod_spec)
    }


def set_container_images(resource: dict, values: dict):
    """Replace the image of every container named in the spec's images"""
    containers = _named_containers(resource)
    for name, image in (values.get("images") or {}).items():
        container = containers.get(name)
        if container is None:
            log.debug2("No container [%s] to set image on", name)
            continue
        log.debug2("Setting image for [%s] to [%s]", name, image)
        container["image"] = image


def set_container_resources(resource: dict, values: dict):
    """Replace the resources of every container named in the spec's resources
    with the canonicalized requests and limits
    """
    containers = _named_containers(resource)
    for name, requirements in (values.get("resources") or {}).items():
        container = containers.get(name)
        if container is None:
            log.debug2("No container [%s] to set resources on", name)
            continue
        container["resources"] = {
            section: {res: str(qty) for res, qty in quantities.items()}
            for section, quantities in requirements.items()
        }
        log.debug3("Resources for [%s]: %s", name, container["resources"])


def _pull_secret_refs(names: List[str]) -> List[dict]:
    return [{"name": name} for name in names]


def set_image_pull_secrets(resource: dict, values: dict):
    """Replace imagePullSecrets on the object. For workloads this is the pod
    template, for a ServiceAccount it is the top level of the object.
    """
    names = values.get("image_pull_secrets")
    if names is None:
        return
    if resource.get("kind") == "ServiceAccount":
        target = resource
    else:
        target = ensure_dict(resource, "spec.template.spec")
    target["imagePullSecrets"] = _pull_secret_refs(names)


## Services ####################################################################


def set_service_type(resource: dict, values: dict):
    """Set spec.type if the spec gives a service type"""
    service_type = values.get("service_type")
    if service_type:
        log.debug2("Setting service type to [%s]", service_type)
        ensure_dict(resource, "spec")["type"] = service_type


## Patches #####################################################################


def apply_resource_patches(resource: dict, values: dict):
    """Apply the raw patches the spec carries for this kind, in order"""
    patches = values.get("patches") or []
    if not patches:
        return
    update_in_place(resource, apply_patches(resource, patches))
