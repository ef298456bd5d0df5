"""
Command input and parse context.

- CommandInput: what the host hands to the engine: the tokens (already split by
  the host's own quoting rules) and the actor issuing the command, if any.
- CommandContext: values bound by arguments during a parse, keyed by argument
  name. Snapshots let the fallback coordination rewind bindings together with
  the reader.
"""
from types import MappingProxyType


class CommandInput:
    __slots__ = ("_tokens", "_actor")

    def __init__(self, tokens=(), /, actor=None):
        if isinstance(tokens, str):
            raise TypeError("command input expects split tokens, not a raw string")
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("command input tokens must be strings")
        self._tokens = tokens
        self._actor = actor

    @property
    def tokens(self):
        return self._tokens

    @property
    def actor(self):
        return self._actor

    def __repr__(self):
        return f"{type(self).__name__}({self._tokens!r}, actor={self._actor!r})"


class CommandContext:
    __slots__ = ("_values",)

    def __init__(self):
        self._values = {}

    def put(self, key, value, /):
        if not isinstance(key, str) or not key:
            raise TypeError("context keys must be non-empty strings")
        if value is None:
            raise ValueError("context values cannot be None")
        self._values[key] = value

    def get(self, key, default=None, /):
        return self._values.get(key, default)

    def has(self, key, /):
        return key in self._values

    def view(self):
        return MappingProxyType(self._values)

    def snapshot(self):
        return dict(self._values)

    def restore(self, snapshot, /):
        self._values.clear()
        self._values.update(snapshot)

    def __getitem__(self, key):
        return self._values[key]

    def __contains__(self, key):
        return key in self._values

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __repr__(self):
        return f"{type(self).__name__}({self._values!r})"


__all__ = (
    "CommandInput",
    "CommandContext",
)
