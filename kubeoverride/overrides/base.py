"""
The ResourceOverrideBase class defines the common contract that the override
for every resource kind implements, along with the registry that maps a kind to
its override.
"""

# Standard
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Type, Union
import abc
import copy

# First Party
import alog

# Local
from .. import constants, fields
from ..action import Action
from ..exceptions import UnsupportedActionError, assert_required, assert_valid_value
from ..patch import select_patches
from ..quantity import Quantity
from ..utils import nested_get, update_in_place

log = alog.use_channel("OVRD")

# A field mapper takes the resource definition and the prepared values
FieldMapper = Callable[[dict, dict], None]

## Registry ####################################################################

# Global map from resource kind to the override class for that kind
_override_registry: Dict[str, Type["ResourceOverrideBase"]] = {}


def register_override(override_class: Type["ResourceOverrideBase"]):
    """Class decorator that registers an override class for its KIND

    Args:
        override_class:  Type[ResourceOverrideBase]
            The override class to register

    Returns:
        override_class:  Type[ResourceOverrideBase]
            The same class, so this can be used as a decorator
    """
    assert issubclass(
        override_class, ResourceOverrideBase
    ), "Overrides must derive from ResourceOverrideBase"
    kind = override_class.KIND
    if kind in _override_registry:
        log.warning("Got duplicate registration for %s", kind)
    _override_registry[kind] = override_class
    return override_class


def get_override_class(kind: str) -> Optional[Type["ResourceOverrideBase"]]:
    """Look up the registered override class for a kind"""
    return _override_registry.get(kind)


def registered_kinds():
    """Get the kinds that currently have a registered override"""
    return sorted(_override_registry)


## Base Class ##################################################################


class ResourceOverrideBase(abc.ABC):
    """Base class for the override of a single resource kind.

    Derived classes declare KIND and FIELDS. FIELDS maps every Action to the
    ordered field mappers that are eligible for that action, so a field that
    must not change after creation is simply absent from the UPDATE entry. A
    class with a KIND that does not cover every Action fails at definition
    time.
    """

    KIND: str = None
    FIELDS: Dict[Action, Tuple[FieldMapper, ...]] = {}

    # Fields that resource patches may not change on update
    IMMUTABLE_FIELDS: Tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.KIND is None:
            return
        missing = [action.name for action in Action if action not in cls.FIELDS]
        if missing:
            raise TypeError(
                f"Override for {cls.KIND} does not declare fields for actions {missing}"
            )

    def __init__(self, component: str):
        """Construct with the name of the component whose sections of the CR
        spec (e.g. storage.<component>) this override reads
        """
        self.component = component

    def apply(
        self,
        spec: Mapping,
        resource: dict,
        action: Union[Action, str],
    ):
        """Override the given resource in place using values from the spec.
        Every value is validated before the resource is touched, and the result
        is checked again after resource patches run, so if this raises, the
        resource is unchanged. On success the nested dicts and lists of the
        resource keep their identity.

        Args:
            spec:  Mapping
                The spec section of the CR
            resource:  dict
                The resource definition to mutate
            action:  Union[Action, str]
                The lifecycle action the resource is being overridden for

        Raises:
            UnsupportedActionError: The action is not one this kind handles
            OverrideConfigError: A value in the spec is invalid or missing
        """
        action = Action.resolve(action)
        mappers = self.FIELDS.get(action)
        if mappers is None:
            raise UnsupportedActionError(action)

        values = self.prepare(spec, action)
        values["patches"] = self.resource_patches(spec)
        log.debug2(
            "Applying %s override for [%s] to %s/%s",
            action.value,
            self.component,
            self.KIND,
            nested_get(resource, "metadata.name"),
        )

        # Mappers and patches run against a working copy which is only written
        # back once everything has succeeded
        working = copy.deepcopy(resource)
        for mapper in mappers + (fields.apply_resource_patches,):
            log.debug4("Running field mapper %s", mapper.__name__)
            mapper(working, values)
        self.verify(working)
        if action == Action.UPDATE:
            for field in self.IMMUTABLE_FIELDS:
                current = nested_get(resource, field)
                assert_valid_value(
                    nested_get(working, field) == current,
                    field,
                    nested_get(working, field),
                    f"{self.KIND} field {field} cannot be changed on update",
                )
        update_in_place(resource, working)

    @abc.abstractmethod
    def prepare(self, spec: Mapping, action: Action) -> dict:
        """Validate the spec and gather every value the field mappers need

        Args:
            spec:  Mapping
                The spec section of the CR
            action:  Action
                The resolved lifecycle action

        Returns:
            values:  dict
                The validated values keyed by name
        """

    def verify(self, resource: dict):
        """Check the result of the field mappers and resource patches. The
        topology labels must never be present with an empty value. Derived
        classes extend this for the fields they own.

        Raises:
            OverrideConfigError: A resource patch produced an invalid value
        """
        self.verify_topology_labels(resource, "metadata.labels")

    ## Shared Helpers ##########################################################

    @staticmethod
    def topology_values(spec: Mapping) -> dict:
        """Get the zone and region hints from the spec"""
        values = {}
        for name, key in (
            ("zone", constants.SPEC_ZONE),
            ("region", constants.SPEC_REGION),
        ):
            value = spec.get(key)
            if value is None:
                value = ""
            assert_valid_value(
                isinstance(value, str),
                key,
                value,
                f"{key} must be a string, got {type(value).__name__}",
            )
            values[name] = value
        return values

    @staticmethod
    def verify_topology_labels(resource: dict, labels_key: str):
        """Reject zone or region labels that are present but empty"""
        labels = nested_get(resource, labels_key) or {}
        for label in (constants.ZONE_LABEL, constants.REGION_LABEL):
            if label in labels:
                value = labels[label]
                assert_valid_value(
                    isinstance(value, str) and bool(value),
                    f"{labels_key}.{label}",
                    value,
                    f"Label {label} must not be empty",
                )

    def component_section(self, spec: Mapping, section: str, required: bool = False):
        """Get the <section>.<component> part of the spec

        Raises:
            MissingRequiredFieldError: If required and the section is absent
        """
        key = constants.NESTED_DICT_DELIM.join([section, self.component])
        value = nested_get(spec, key)
        if required:
            assert_required(value is not None, key)
        return value

    @staticmethod
    def parse_requirements(requirements: Mapping) -> Dict[str, Dict[str, Quantity]]:
        """Parse a {requests: {...}, limits: {...}} block into quantities"""
        return {
            section: {
                res: Quantity.parse(qty) for res, qty in (quantities or {}).items()
            }
            for section, quantities in (requirements or {}).items()
            if section in ("requests", "limits")
        }

    def resource_patches(self, spec: Mapping) -> List[dict]:
        """Get the validated raw patches the spec carries for this component
        and kind
        """
        key = constants.NESTED_DICT_DELIM.join(
            [constants.SPEC_RESOURCE_PATCHES, self.component]
        )
        patches = nested_get(spec, key)
        if patches is None:
            return []
        return select_patches(key, patches, self.KIND)

    @staticmethod
    def pull_secret_names(spec: Mapping) -> Optional[List[str]]:
        """Get the validated list of image pull secret names, or None if the
        spec does not set them
        """
        names = spec.get(constants.SPEC_IMAGE_PULL_SECRETS)
        if names is None:
            return None
        assert_valid_value(
            isinstance(names, list)
            and all(isinstance(name, str) and name for name in names),
            constants.SPEC_IMAGE_PULL_SECRETS,
            names,
        )
        return list(names)
