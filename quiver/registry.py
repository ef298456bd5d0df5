"""
Command registry: maps normalized names and aliases to child commands.

Each command owns exactly one registry for its children (Command.children).
Invariants
- a command is registered in at most one registry at a time; its parent link
  is set on register() and cleared on unregister().
- canonical names are unique: a clash fails the registration with ValueError
  and leaves the registry untouched.
- aliases are best-effort: an alias already claimed by another command stays
  with that command (first registrant wins). The skipped alias is reported as
  an AliasCollisionWarning through the owner's trigger().
- names are normalized (trimmed, casefolded) on registration and lookup alike.
- enumeration follows insertion order.
"""
from types import MappingProxyType

from .faults import AliasCollisionWarning
from .messages import message
from .utils import normalize


class CommandRegistry:
    __slots__ = ("_parent", "_commands", "_aliases")

    def __init__(self, parent, /):
        if parent is None:
            raise TypeError("command registry needs an owning command")
        self._parent = parent
        self._commands = {}
        self._aliases = {}

    @property
    def parent(self):
        return self._parent

    @property
    def commands(self):
        return tuple(self._commands)

    @property
    def aliases(self):
        return tuple(self._aliases)

    @property
    def aliases_map(self):
        return MappingProxyType(self._aliases)

    def register(self, command, /):
        """
        index `command` under its canonical name and aliases, then adopt it.

        raises
        - ValueError: the command already has a parent, would become its own
          ancestor, or its canonical name is taken.
        """
        if command.parent is not None:
            raise ValueError(f"command {command.name!r} is already registered")
        if command in self._parent.path:
            raise ValueError(f"command {command.name!r} cannot be registered below itself")
        if (name := normalize(command.name)) in self._aliases:
            raise ValueError(f"command name {command.name!r} is already in use")

        self._commands[command] = None
        self._aliases[name] = command
        collisions = []
        for alias in command.aliases:
            owner = self._aliases.setdefault(key := normalize(alias), command)
            if owner is not command:
                collisions.append((key, owner))
        command._set_parent(self._parent)

        # Warnings may raise (warnings as errors); the command is adopted by now.
        for alias, owner in collisions:
            self._collision(alias, command, owner)
        return command

    def _collision(self, alias, command, owner):
        warning = AliasCollisionWarning(
            message("alias-collision", alias=alias, command=command.name, owner=owner.name)
        )
        self._parent.trigger(warning)

    def unregister(self, command, /):
        """
        drop `command` and every alias pointing at it, then orphan it.

        raises
        - ValueError: the command is not registered here.
        """
        if command not in self._commands or command.parent is not self._parent:
            raise ValueError(f"command {command.name!r} is not registered here")
        for alias in self.aliases_of(command):
            del self._aliases[alias]
        del self._commands[command]
        command._set_parent(None)
        return command

    def resolve(self, alias, /):
        """
        the command registered under `alias`, or None (never raises).
        """
        if not isinstance(alias, str):
            return None
        return self._aliases.get(normalize(alias))

    def aliases_of(self, command, /):
        return [alias for alias, owner in self._aliases.items() if owner is command]

    def is_registered(self, command, /):
        return command in self._commands

    def __len__(self):
        return len(self._commands)

    def __iter__(self):
        return iter(tuple(self._commands))

    def __contains__(self, item):
        if isinstance(item, str):
            return self.resolve(item) is not None
        return item in self._commands

    def __bool__(self):
        return bool(self._commands)

    def __repr__(self):
        return f"{type(self).__name__}({list(self._aliases)!r})"


__all__ = (
    "CommandRegistry",
)
