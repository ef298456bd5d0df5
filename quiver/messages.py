"""
Message templates for user-facing faults.

The engine never produces final strings: faults carry a Message, i.e. a template
with named placeholders plus the values known at the raise site. Rendering is
left to the host; Message.render() is a plain str.format_map convenience that
keeps unknown placeholders untouched.

Placeholders in use
- {argument}  display name of the offending argument
- {input}     raw text the user typed (joined with the argument separator)
- {range}     accepted-range description (integers)
- {position}  ordinal position of the offending token

Host overrides
- A host may define __messages__ in __main__ (mapping key -> template) to
  replace any default template below, e.g. for localization.
"""
from types import MappingProxyType

from rich.text import Text

DEFAULTS = MappingProxyType({
    "end-of-input": "no more input to read",
    "missing-argument": "missing argument '{argument}'",
    "invalid-argument": "invalid value '{input}' for argument '{argument}'",
    "invalid-integer": "'{input}' is not a valid integer for argument '{argument}' (expected {range})",
    "invalid-uuid": "'{input}' is not a valid uuid for argument '{argument}'",
    "argument-rejected": "'{input}' is not accepted for argument '{argument}'",
    "object-not-found": "no object found for '{input}'",
    "requires-actor": "argument '{argument}' can only be used by an actor",
    "missing-target": "no targeted object found for argument '{argument}'",
    "unexpected-tokens": "unexpected input '{input}' from {position} position",
    "alias-collision": "alias '{alias}' of command '{command}' is already taken by command '{owner}'",
})


class _Placeholders(dict):
    def __missing__(self, key):
        return "{" + key + "}"


class Message:
    """
    a template with named placeholders and the values bound so far.

    Messages are immutable; format() returns a new message with merged values.
    """
    __slots__ = ("_template", "_arguments")

    def __init__(self, template, /, **arguments):
        if not isinstance(template, str):
            raise TypeError("message template must be a string")
        self._template = template
        self._arguments = MappingProxyType(arguments)

    @property
    def template(self):
        return self._template

    @property
    def arguments(self):
        return self._arguments

    def format(self, **arguments):
        return type(self)(self._template, **(self._arguments | arguments))

    def render(self):
        return self._template.format_map(_Placeholders({key: str(value) for key, value in self._arguments.items()}))

    def __str__(self):
        return self.render()

    def __repr__(self):
        return f"Message({self._template!r}, {dict(self._arguments)!r})"

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return self._template == other._template and self._arguments == other._arguments

    def __hash__(self):
        return hash((self._template, frozenset(self._arguments)))

    def __rich__(self):
        return Text(self.render())


def message(key, /, **arguments):
    """
    build a Message from a template key, honouring host overrides.

    lookup
    - __messages__ mapping in __main__ (when present) takes precedence.
    - otherwise the DEFAULTS table above; unknown keys raise KeyError.
    """
    overrides = getattr(__import__("__main__"), "__messages__", {})
    try:
        template = overrides[key]
    except KeyError:
        template = DEFAULTS[key]
    return Message(template, **arguments)


__all__ = (
    "DEFAULTS",
    "Message",
    "message",
)
