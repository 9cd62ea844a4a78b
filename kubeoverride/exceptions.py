"""
This module implements custom exceptions
"""

# Standard
from typing import Any

## Base Error ##################################################################


class OverrideError(Exception):
    """Base class for all kubeoverride exceptions"""

    def __init__(self, message: str, is_fatal_error: bool):
        """Construct with a flag indicating whether this is a fatal error. This
        will be a static property of all children.
        """
        super().__init__(message)
        self._is_fatal_error = is_fatal_error

    @property
    def is_fatal_error(self):
        """Property indicating whether or not this error should stop the
        reconciliation rather than be retried as-is
        """
        return self._is_fatal_error


## Configuration Errors ########################################################


class OverrideConfigError(OverrideError):
    """An OverrideConfigError is caused by user-authored configuration in the
    CR spec. It will not resolve until the CR is corrected, so it should be
    surfaced to the user.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=True)


class InvalidQuantityError(OverrideConfigError):
    """Exception raised when a size string is not a valid resource quantity"""

    def __init__(self, value: Any, message: str = ""):
        self.value = value
        super().__init__(message)


class MissingRequiredFieldError(OverrideConfigError):
    """Exception raised when the CR spec lacks a field the override needs"""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"Missing required field [{field}]")


class InvalidFieldValueError(OverrideConfigError):
    """Exception raised when a CR spec field holds a value the override cannot
    use
    """

    def __init__(self, field: str, value: Any, message: str = ""):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for [{field}]: {value!r}")


## Contract Errors #############################################################


class OverrideContractError(OverrideError):
    """An OverrideContractError indicates that the caller used the override
    engine in a way it does not support. This is a bug in the caller, not a
    problem with the CR.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=True)


class UnsupportedActionError(OverrideContractError):
    """Exception raised when an override is requested for an unknown action"""

    def __init__(self, action: Any, message: str = ""):
        self.action = action
        super().__init__(message or f"Unsupported override action [{action}]")


class UnsupportedKindError(OverrideContractError):
    """Exception raised when no override is registered for a resource kind"""

    def __init__(self, kind: Any, message: str = ""):
        self.kind = kind
        super().__init__(message or f"No override registered for kind [{kind}]")


## Assertions ##################################################################


def assert_required(condition: bool, field: str, message: str = ""):
    """Replacement for assert() which will throw a MissingRequiredFieldError.
    This should be used when an override cannot proceed without a given CR
    field.
    """
    if not condition:
        raise MissingRequiredFieldError(field, message)


def assert_valid_value(condition: bool, field: str, value: Any, message: str = ""):
    """Replacement for assert() which will throw an InvalidFieldValueError"""
    if not condition:
        raise InvalidFieldValueError(field, value, message)
