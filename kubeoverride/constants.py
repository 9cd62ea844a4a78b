"""
Shared module to hold constant values for the library
"""

# Label keys used to carry topology hints on overridden objects. These are
# consumed by scheduling/affinity rules, so renaming them is a breaking change.
ZONE_LABEL = "zone"
REGION_LABEL = "region"

# Key in a PVC's spec.resources.requests that holds the capacity request
STORAGE_RESOURCE = "storage"

# Delimiter used for nested dict keys
NESTED_DICT_DELIM = "."

# CR spec sections read by the overrides
SPEC_ZONE = "zone"
SPEC_REGION = "region"
SPEC_STORAGE = "storage"
SPEC_STORAGE_SIZE = "size"
SPEC_STORAGE_CLASS = "class"
SPEC_SERVICE = "service"
SPEC_REPLICAS = "replicas"
SPEC_IMAGES = "images"
SPEC_RESOURCES = "resources"
SPEC_IMAGE_PULL_SECRETS = "imagePullSecrets"
SPEC_RESOURCE_PATCHES = "resourcePatches"

# Service types accepted for spec.service.type
SERVICE_TYPES = ["ClusterIP", "NodePort", "LoadBalancer", "ExternalName"]
