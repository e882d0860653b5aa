"""
Parley argument context: the immutable payload handed to every resolver call.

Common keys
- argument:  the resolver being run.
- args:      the Args facade of the invocation.
- caller:    opaque caller identity supplied by the host.
- minimum / maximum: bounds (length for strings, value for numbers, instant for dates).
- inclusive: whether bounds are inclusive (default True).

Resolver-specific extras ride along untouched, e.g. enum/case_insensitive for
the enum resolver and truths/falses for the boolean resolver. Any key can be
read as an attribute; a missing key reads as None.
"""
from collections.abc import Mapping
from types import MappingProxyType

DEFAULTS = MappingProxyType({
    "argument": None,
    "args": None,
    "caller": None,
    "minimum": None,
    "maximum": None,
    "inclusive": True,
})


class ArgumentContext(Mapping):
    """
    Read-only mapping with attribute access.

    Example
        >>> context = ArgumentContext(minimum=1, maximum=10)
        >>> context.minimum, context["inclusive"], context.enum
        (1, True, None)
    """
    __slots__ = ("_data",)

    def __init__(self, data=None, /, **entries):
        merged = dict(DEFAULTS)
        merged.update(data or {})
        merged.update(entries)
        for key in merged:
            if not isinstance(key, str):
                raise TypeError("ArgumentContext keys must be strings")
        object.__setattr__(self, "_data", MappingProxyType(merged))

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __getattr__(self, name):
        if name.startswith("__") or name == "_data":
            raise AttributeError(name)
        return self._data.get(name)

    def __setattr__(self, name, value):
        raise AttributeError("ArgumentContext is immutable")

    def __delattr__(self, name):
        raise AttributeError("ArgumentContext is immutable")

    def replace(self, **overrides):
        """
        Return a new context with overrides applied.
        """
        return type(self)(self._data, **overrides)

    def __repr__(self):
        shown = {key: value for key, value in self._data.items() if key not in ("argument", "args")}
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % item for item in shown.items()))


__all__ = (
    "ArgumentContext",
)
