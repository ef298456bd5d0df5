"""
Shared helpers for the quiver argument engine.

Scope
- Unset: internal sentinel distinguishing "not provided" from None.
- normalize(): the one alias normalization used on both registration and lookup.
- join(): re-assemble consumed tokens with the argument separator.
- ordinal(): position labels used by position-first messages.
"""
import functools
from typing import final

# Separator the host used to split the raw line into tokens. Identifiers whose
# canonical form contains it span several tokens.
ARGUMENTS_SEPARATOR = " "

# Upper bound of completion suggestions returned by a single completion request.
MAX_SUGGESTIONS = 20


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process-wide singleton (see __new__).
    - display: repr(Unset) -> "Unset".
    - final: subclassing is forbidden.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def nullify(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object` unchanged.
    """
    return default if object is Unset else object


def normalize(alias, /):
    """
    normalize a command name or alias for registry keys.

    casefolds and trims; applied on both registration and lookup so aliases
    never become unreachable.
    """
    if not isinstance(alias, str):
        raise TypeError("normalize() argument must be a string")
    return alias.strip().casefold()


def join(tokens, /):
    """
    join tokens with ARGUMENTS_SEPARATOR (the inverse of the host's split).
    """
    return ARGUMENTS_SEPARATOR.join(tokens)


@functools.cache
def ordinal(number, /):
    """
    return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first".."tenth").
    - other numbers use numeric ordinals with English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    "ARGUMENTS_SEPARATOR",
    "MAX_SUGGESTIONS",
    "UnsetType",
    "Unset",
    "nullify",
    "normalize",
    "join",
    "ordinal",
)
