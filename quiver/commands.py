r"""
Quiver commands: argument sequences, child routing, parsing and completion.

Overview
- Command: a named node holding an ordered sequence of arguments and a registry
  of child commands (Command.children). Leading tokens naming a child descend
  into it; the remaining tokens are parsed by the reached command's arguments.
- ParsedCommand: the outcome of a successful parse (the command that was
  reached and the context holding the bound values).

Parsing
- Arguments run left to right against one ArgumentsReader; each binds its value
  into the CommandContext under its name.
- A FallbackEscalation rewinds the reader and the context to before the
  escalating argument. The later arguments then run first:
  • they succeed and consume everything: the fallback supplies its value via
    parse_fallback(..., parsing_failed=False).
  • otherwise reader and context are rewound again, the fallback parses at its
    own position via parse_fallback(..., parsing_failed=True), and the later
    arguments run once more.
  The same argument escalating twice within one pass is fatal
  (DuplicateEscalationError).
- Tokens left over after the last argument raise UnexpectedTokensError.

Completion
- Child names and aliases matching the last token come first, then the argument
  walk: every argument that fails at the last token, or is optional and
  consumes nothing, contributes completions. The walk only continues past
  optional arguments. Faults never escape; results are de-duplicated and capped
  at MAX_SUGGESTIONS.

Runtime switches
- shell: print faults instead of raising them (see faults.trigger()).
- colorful, fancy: rendering switches forwarded to the faults.

Quick example:
    >>> from quiver import Command, IntegerArgument, OptionalArgument, StringArgument
    >>> give = Command("give", aliases=("g",), arguments=(
    ...     StringArgument("item"),
    ...     OptionalArgument(IntegerArgument("amount", minimum=1)),
    ... ))
    >>> give.parse(["apple", "3"]).context["amount"]
    3
"""
import copy
import re
from typing import NamedTuple

from .arguments import Argument, FallbackArgument
from .context import CommandContext, CommandInput
from .faults import *
from .messages import message
from .reader import ArgumentsReader
from .registry import CommandRegistry
from .utils import *

_NAME = re.compile(r"\S+")


class ParsedCommand(NamedTuple):
    command: "Command"
    context: CommandContext


def _coerce(input):
    if isinstance(input, CommandInput):
        return input
    return CommandInput(input)


class Command:
    """
    Command node: arguments, child commands and runtime switches.

    Parameters
    - name: str
      Canonical name, unique among the siblings. Non-empty, no whitespace.
    - aliases: Iterable[str]
      Alternative names (best-effort, see CommandRegistry).
    - arguments: Iterable[Argument]
      Claimed in order through add_argument().
    - descr: Unset | str
      One-line description.
    - shell, colorful, fancy: bool (keyword-only)
      Runtime switches injected into every triggered fault.
    """

    def __init__(self, name, /, aliases=(), arguments=(), descr=Unset, *, shell=False, colorful=True, fancy=False):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__name__} name must be a string")
        elif not _NAME.fullmatch(name):
            raise ValueError(f"{type(self).__name__} name cannot be empty or contain whitespace")
        if isinstance(aliases, str):
            raise TypeError(f"{type(self).__name__} aliases must be an iterable of strings, not a string")
        aliases = tuple(aliases)
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError(f"{type(self).__name__} aliases must be strings")
            elif not _NAME.fullmatch(alias):
                raise ValueError(f"{type(self).__name__} aliases cannot be empty or contain whitespace")
        if not isinstance(descr, str | Unset):
            raise TypeError(f"{type(self).__name__} description must be a string")
        for switch, value in {"shell": shell, "colorful": colorful, "fancy": fancy}.items():
            if not isinstance(value, bool):
                raise TypeError(f"{type(self).__name__} {switch!r} must be a boolean")

        self._name = name
        self._aliases = aliases
        self._descr = descr
        self._shell = shell
        self._colorful = colorful
        self._fancy = fancy
        self._parent = None
        self._arguments = []
        self._children = CommandRegistry(self)
        for argument in arguments:
            self.add_argument(argument)

    @property
    def name(self):
        return self._name

    @property
    def aliases(self):
        return self._aliases

    @property
    def descr(self):
        return nullify(self._descr)

    @property
    def arguments(self):
        return tuple(self._arguments)

    @property
    def parent(self):
        return self._parent

    @property
    def children(self):
        return self._children

    @property
    def shell(self):
        return self._shell

    @property
    def colorful(self):
        return self._colorful

    @property
    def fancy(self):
        return self._fancy

    @property
    def root(self):
        """
        the topmost command of this command's hierarchy.
        """
        child, parent = self, self.parent
        while parent is not None:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        the commands from the root down to this one.
        """
        path = [command := self]
        while command.parent is not None:
            path.append(command := command.parent)
        return tuple(reversed(path))

    def _set_parent(self, parent):
        self._parent = parent

    def add_argument(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__name__} arguments must be Argument instances")
        if any(existing.name == argument.name for existing in self._arguments):
            raise ValueError(f"{type(self).__name__} argument name {argument.name!r} is already in use")
        argument.set_parent(self)
        self._arguments.append(argument)
        return argument

    def register(self, command, /):
        return self._children.register(command)

    def unregister(self, command, /):
        return self._children.unregister(command)

    def usage(self):
        parts = [command.name for command in self.path]
        parts += [argument.format() for argument in self._arguments]
        if self._children and not self._arguments:
            parts.append("<%s>" % "|".join(command.name for command in self._children))
        return join(parts)

    def trigger(self, fault, /, **options):
        """
        surface `fault` with this command's runtime switches.

        errors get a usage hint unless they already carry one.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        if isinstance(fault, CommandException) and "hint" not in fault.options:
            options.setdefault("hint", f"usage: {self.usage()}")
        fault = copy.replace(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)
        return trigger(fault)

    def route(self, reader, /):
        """
        descend into child commands named by the leading tokens.
        """
        command = self
        while (token := reader.peek()) is not None and (child := command.children.resolve(token)) is not None:
            reader.next()
            command = child
        return command

    def parse(self, input, /):
        """
        route and parse `input` (CommandInput or iterable of tokens).

        raises ArgumentParseError subclasses; never binds partial results into
        the returned context on failure.
        """
        input = _coerce(input)
        reader = ArgumentsReader(input.tokens)
        return self.route(reader)._parse(input, reader)

    def _parse(self, input, reader):
        context = CommandContext()
        self.parse_arguments(input, context, reader)
        if reader.has_next():
            leftover = join(reader.remaining())
            raise UnexpectedTokensError(
                None,
                message("unexpected-tokens", input=leftover, position=ordinal(reader.cursor + 2)),
                input=leftover
            )
        return ParsedCommand(self, context)

    def invoke(self, input, /):
        """
        parse `input` and surface faults through trigger().

        returns the ParsedCommand, or None when a fault was printed (shell mode).
        """
        input = _coerce(input)
        reader = ArgumentsReader(input.tokens)
        command = self.route(reader)
        try:
            return command._parse(input, reader)
        except CommandException as fault:
            command.trigger(fault)

    def parse_arguments(self, input, context, reader):
        self._parse_from(0, input, context, reader, frozenset())

    def _parse_from(self, index, input, context, reader, escalated):
        for position in range(index, len(self._arguments)):
            argument = self._arguments[position]
            state, snapshot = reader.create_snapshot(), context.snapshot()
            try:
                argument.parse(input, context, reader)
            except FallbackEscalation as escalation:
                reader.restore_state(state)
                context.restore(snapshot)
                return self._parse_fallback(position, escalation, input, context, reader, escalated)

    def _parse_fallback(self, position, escalation, input, context, reader, escalated):
        argument = self._arguments[position]
        if argument in escalated:
            raise DuplicateEscalationError(f"argument {argument.name!r} escalated twice in one pass")
        escalated = escalated | {argument}
        state, snapshot = reader.create_snapshot(), context.snapshot()

        # Give the later arguments the first go at the input.
        try:
            self._parse_from(position + 1, input, context, reader, escalated)
        except ArgumentParseError:
            parsing_failed = True
        else:
            parsing_failed = reader.has_next()

        if not parsing_failed:
            self._bind(argument, input, context, reader, escalation, False)
            return

        reader.restore_state(state)
        context.restore(snapshot)
        self._bind(argument, input, context, reader, escalation, True)
        self._parse_from(position + 1, input, context, reader, escalated)

    def _bind(self, argument, input, context, reader, escalation, parsing_failed):
        try:
            value = argument.parse_fallback(input, context, reader, escalation, parsing_failed)
        except FallbackEscalation:
            raise DuplicateEscalationError(f"argument {argument.name!r} escalated twice in one pass") from None
        if value is not None:
            context.put(argument.name, value)

    def complete(self, input, /):
        """
        suggestions for the last (partial) token of `input`.

        never raises; returns at most MAX_SUGGESTIONS unique
        suggestions in order.
        """
        input = _coerce(input)
        reader = ArgumentsReader(input.tokens)
        if not reader.has_next():
            return []

        # The last token is partial and never selects a child.
        command = self
        while reader.remaining_count() > 1 and (child := command.children.resolve(reader.peek())) is not None:
            reader.next()
            command = child

        suggestions = []
        if reader.remaining_count() == 1:
            partial = normalize(reader.peek())
            suggestions += [alias for alias in command.children.aliases if alias.startswith(partial)]
        suggestions += command.complete_arguments(input, CommandContext(), reader)
        return list(dict.fromkeys(suggestions))[:MAX_SUGGESTIONS]

    def complete_arguments(self, input, context, reader):
        suggestions = []
        for argument in self._arguments:
            if not reader.has_next():
                break
            state, snapshot = reader.create_snapshot(), context.snapshot()
            try:
                argument.parse(input, context, reader)
            except Exception:
                reader.restore_state(state)
                context.restore(snapshot)
                suggestions += self._complete(argument, input, context, reader)
                if argument.is_optional() or isinstance(argument, FallbackArgument):
                    continue
                break

            if not reader.has_next():
                # The argument took the last token; it owns the completion.
                reader.restore_state(state)
                context.restore(snapshot)
                suggestions += self._complete(argument, input, context, reader)
                break
            if reader.cursor == state.cursor and argument.is_optional():
                suggestions += self._complete(argument, input, context, reader)
        return suggestions

    def _complete(self, argument, input, context, reader):
        state = reader.create_snapshot()
        try:
            return list(argument.complete(input, context, reader))
        except Exception:
            return []
        finally:
            reader.restore_state(state)

    def __repr__(self):
        return f"{type(self).__name__}(name={self._name!r})"


__all__ = (
    "ParsedCommand",
    "Command",
)
