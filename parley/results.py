"""
Parley result values.

- Ok(value) / Err(error): outcome of a resolver, an Args extraction, a
  resolution or a dispatch. Expected failures travel as Err values; nothing in
  the engine raises for bad user input.
- Allow() / Deny(reason): verdict of a custom gate predicate (can_run).

Both families support structural pattern matching:

    match await args.pick("integer", minimum=1):
        case Ok(value):
            ...
        case Err(error):
            ...
"""


class Ok[_T]:
    """
    Successful outcome carrying a value.
    """
    __slots__ = ("value",)
    __match_args__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def is_ok(self):
        return True

    def is_err(self):
        return False

    def unwrap(self):
        return self.value

    def unwrap_or(self, default, /):
        return self.value

    def unwrap_err(self):
        raise ValueError("unwrap_err() called on an ok result: %r" % (self.value,))

    def map(self, callback, /):
        return Ok(callback(self.value))

    def map_err(self, callback, /):
        return self

    def __eq__(self, other):
        if not isinstance(other, Ok):
            return NotImplemented
        return self.value == other.value

    __hash__ = None

    def __repr__(self):
        return "Ok(%r)" % (self.value,)

    def __rich_repr__(self):
        yield self.value


class Err[_E]:
    """
    Failed outcome carrying an error (usually a UserError).

    unwrap() raises the error when it is an exception, so a caller that wants
    exception flow can opt into it explicitly.
    """
    __slots__ = ("error",)
    __match_args__ = ("error",)

    def __init__(self, error, /):
        self.error = error

    def is_ok(self):
        return False

    def is_err(self):
        return True

    def unwrap(self):
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError("unwrap() called on an error result: %r" % (self.error,))

    def unwrap_or(self, default, /):
        return default

    def unwrap_err(self):
        return self.error

    def map(self, callback, /):
        return self

    def map_err(self, callback, /):
        return Err(callback(self.error))

    def __eq__(self, other):
        if not isinstance(other, Err):
            return NotImplemented
        return self.error == other.error

    __hash__ = None

    def __repr__(self):
        return "Err(%r)" % (self.error,)

    def __rich_repr__(self):
        yield self.error


class Allow:
    """
    Gate verdict: the caller may run the subcommand.
    """
    __slots__ = ()
    __match_args__ = ()

    def __eq__(self, other):
        return isinstance(other, Allow)

    def __hash__(self):
        return hash(Allow)

    def __bool__(self):
        return True

    def __repr__(self):
        return "Allow()"


class Deny:
    """
    Gate verdict: the caller may not run the subcommand; reason is user-facing.
    """
    __slots__ = ("reason",)
    __match_args__ = ("reason",)

    def __init__(self, reason, /):
        if not isinstance(reason, str):
            raise TypeError("Deny() reason must be a string")
        if not (reason := reason.strip()):
            raise ValueError("Deny() reason cannot be empty")
        self.reason = reason

    def __eq__(self, other):
        if not isinstance(other, Deny):
            return NotImplemented
        return self.reason == other.reason

    def __hash__(self):
        return hash((Deny, self.reason))

    def __bool__(self):
        return False

    def __repr__(self):
        return "Deny(%r)" % self.reason


__all__ = (
    "Ok",
    "Err",
    "Allow",
    "Deny",
)
