"""
The lifecycle actions an override can be applied for
"""

# Standard
from enum import Enum
from typing import Union

# Local
from .exceptions import UnsupportedActionError


class Action(Enum):
    """The lifecycle phase of the object being overridden. Some fields (e.g. a
    PVC's storage class) are only legal to set before the object exists in the
    cluster, so each override declares which fields it sets for each action.
    """

    CREATE = "create"
    UPDATE = "update"

    @classmethod
    def resolve(cls, action: Union["Action", str]) -> "Action":
        """Get the Action for an Action member or its (case-insensitive) string
        value

        Raises:
            UnsupportedActionError: If the action is not a known Action
        """
        if isinstance(action, cls):
            return action
        values = {member.value: member for member in cls}
        if isinstance(action, str) and action.lower() in values:
            return values[action.lower()]
        raise UnsupportedActionError(action)
