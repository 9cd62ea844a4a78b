"""
Package exports
"""

# Local
from . import config
from .action import Action
from .exceptions import (
    InvalidFieldValueError,
    InvalidQuantityError,
    MissingRequiredFieldError,
    OverrideConfigError,
    OverrideContractError,
    OverrideError,
    UnsupportedActionError,
    UnsupportedKindError,
)
from .override import Override
from .overrides import ResourceOverrideBase, register_override
from .quantity import Quantity, parse_quantity
