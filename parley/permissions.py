"""
Parley permission levels.

The engine never computes a caller's level: the host derives it from its own
roles and passes it to the Args facade. Subcommands declare the level they
require; the dispatcher compares both through a `permits(required, level)`
hook, which defaults to permits() below.
"""
from enum import IntEnum


class PermissionLevel(IntEnum):
    """
    Ordered caller levels, higher is more privileged.
    """
    BLOCKED = 0
    REGULAR = 1
    MODERATOR = 2
    ADMINISTRATOR = 3
    OWNER = 4

    @classmethod
    def parse(cls, value, /):
        """
        Accept a PermissionLevel, its integer value or its (case-insensitive) name.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError("unknown permission level %r" % value) from None
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise TypeError("permission level must be a PermissionLevel, an integer or a name")


def permits(required, level, /):
    """
    Default comparison hook: a caller passes when its level is at least the required one.
    """
    return level >= required


__all__ = (
    "PermissionLevel",
    "permits",
)
