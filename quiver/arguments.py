r"""
Quiver argument tree: parsing units and their optional/fallback decorators.

Overview
- Argument: the base parsing unit. It consumes one or more tokens from an
  ArgumentsReader and produces a typed value, or raises an ArgumentParseError.
  It can also suggest completions for a partial token.
- Leaves
  • StringArgument: any single token.
  • IntegerArgument: a single integer token, optionally bounded.
- Decorators (each owns exactly one child argument)
  • OptionalArgument: a failed or absent parse yields None instead of an error.
    The reader is rolled back to where the child started.
  • DefaultValueFallback: a failed parse escalates (FallbackEscalation) so the
    command can retry it after the later arguments ran; when those consume the
    input, the default value is used.

Contract (all arguments)
- parse_value(input, context, reader) returns the value with the cursor on the
  last consumed token. On failure it raises the most specific fault:
  MissingArgumentError (no token), InvalidArgumentError (bad shape) or
  ArgumentRejectedError (filtered). Leaves leave the cursor untouched on failure;
  composites restore it.
- parse(...) wraps parse_value and binds non-None values into the context under
  the argument name.
- complete(input, context, reader) returns suggestions for the partial input;
  the command walk never lets its faults escape.

Ownership
- An argument has at most one parent, set once through set_parent(). Wrappers
  claim their child at construction; commands claim their arguments.

Quick example:
    >>> from quiver.arguments import IntegerArgument, OptionalArgument, StringArgument
    >>> count = OptionalArgument(IntegerArgument("count", minimum=1))
    >>> name = StringArgument("name")
"""
import re

from .faults import *
from .messages import message
from .utils import *

_NAME = re.compile(r"\S+")
_INTEGER = re.compile(r"[+-]?\d+")


class Argument:
    """
    Base parsing unit.

    Parameters
    - name: str
      Context binding key and {argument} placeholder. Non-empty, no whitespace.
    - display: Unset | str (keyword-only)
      Name shown to users instead of `name`.
    """

    def __init__(self, name, /, *, display=Unset):
        if not isinstance(name, str):
            raise TypeError(f"{type(self).__name__} name must be a string")
        elif not _NAME.fullmatch(name):
            raise ValueError(f"{type(self).__name__} name cannot be empty or contain whitespace")
        if not isinstance(display, str | Unset):
            raise TypeError(f"{type(self).__name__} display name must be a string")
        elif isinstance(display, str) and not (display := display.strip()):
            raise ValueError(f"{type(self).__name__} display name cannot be empty")
        self._name = name
        self._display = display
        self._parent = None

    @property
    def name(self):
        return self._name

    @property
    def display_name(self):
        return nullify(self._display, self._name)

    @property
    def parent(self):
        return self._parent

    @property
    def root(self):
        """
        the topmost argument of this argument's chain of wrappers.
        """
        argument = self
        while isinstance(argument.parent, Argument):
            argument = argument.parent
        return argument

    def set_parent(self, parent, /):
        if parent is None or parent is self:
            raise ValueError(f"invalid parent for argument {self._name!r}")
        if self._parent is not None:
            raise ValueError(f"argument {self._name!r} already has a parent")
        self._parent = parent

    def is_optional(self):
        return False

    def reduced_format(self):
        return self.display_name

    def format(self):
        if self.is_optional():
            return f"[{self.reduced_format()}]"
        return f"<{self.reduced_format()}>"

    def missing_message(self):
        return message("missing-argument", argument=self.display_name)

    def invalid_message(self, input, /):
        return message("invalid-argument", argument=self.display_name, input=input)

    def requires_actor_message(self):
        return message("requires-actor", argument=self.display_name)

    def missing_error(self):
        return MissingArgumentError(self, self.missing_message())

    def invalid_error(self, input, /):
        return InvalidArgumentError(self, self.invalid_message(input), input=input)

    def requires_actor_error(self):
        return RequiresActorError(self, self.requires_actor_message())

    def parse(self, input, context, reader):
        """
        parse a value and bind it into the context (None is not bound).
        """
        try:
            value = self.parse_value(input, context, reader)
        except EndOfInputError:
            raise self.missing_error() from None
        if value is not None:
            context.put(self._name, value)
        return value

    def parse_value(self, input, context, reader):
        raise NotImplementedError(f"{type(self).__name__} does not implement parse_value()")

    def complete(self, input, context, reader):
        return []

    def __repr__(self):
        return f"{type(self).__name__}(name={self._name!r})"


class StringArgument(Argument):
    """
    Accepts any single token as-is.
    """

    def parse_value(self, input, context, reader):
        if not reader.has_next():
            raise self.missing_error()
        return reader.next()


class IntegerArgument(Argument):
    """
    Accepts a single base-10 integer token within optional inclusive bounds.

    The invalid message carries a {range} placeholder describing the bounds.
    """

    def __init__(self, name, /, minimum=Unset, maximum=Unset, *, display=Unset):
        super().__init__(name, display=display)
        for bound in (minimum, maximum):
            if not isinstance(bound, int | Unset) or isinstance(bound, bool):
                raise TypeError(f"{type(self).__name__} bounds must be integers")
        if minimum is not Unset and maximum is not Unset and minimum > maximum:
            raise ValueError(f"{type(self).__name__} minimum cannot exceed maximum")
        self._minimum = minimum
        self._maximum = maximum

    @property
    def minimum(self):
        return nullify(self._minimum)

    @property
    def maximum(self):
        return nullify(self._maximum)

    def describe_range(self):
        if self._minimum is not Unset and self._maximum is not Unset:
            return f"between {self._minimum} and {self._maximum}"
        if self._minimum is not Unset:
            return f"at least {self._minimum}"
        if self._maximum is not Unset:
            return f"at most {self._maximum}"
        return "any integer"

    def invalid_message(self, input, /):
        return message("invalid-integer", argument=self.display_name, input=input, range=self.describe_range())

    def parse_value(self, input, context, reader):
        if (token := reader.peek()) is None:
            raise self.missing_error()
        if not _INTEGER.fullmatch(token):
            raise self.invalid_error(token)
        value = int(token)
        if self._minimum is not Unset and value < self._minimum:
            raise self.invalid_error(token)
        if self._maximum is not Unset and value > self._maximum:
            raise self.invalid_error(token)
        reader.next()
        return value


def _claim(owner, argument):
    argument.set_parent(owner)
    return argument


class FallbackArgument(Argument):
    """
    Argument that may ask for a second parsing pass.

    Protocol
    - parse_value raises FallbackEscalation(self, original_error) instead of a
      plain parse error when it cannot parse at its position.
    - The command then rewinds, parses the later arguments, and calls
      parse_fallback(input, context, reader, escalation, parsing_failed):
      • parsing_failed is False: the later arguments consumed the rest of the
        input; the reader is exhausted and the fallback supplies a value
        without consuming anything.
      • parsing_failed is True: the later arguments failed; reader and context
        are rewound to this argument's position and the fallback either parses
        from there or raises the error to report.
    - The returned value is bound under the argument name (None is not bound).
    - Escalating again from parse_fallback is fatal (DuplicateEscalationError).
    """

    def parse_fallback(self, input, context, reader, escalation, parsing_failed):
        raise NotImplementedError(f"{type(self).__name__} does not implement parse_fallback()")


class OptionalArgument(FallbackArgument):
    """
    Makes the wrapped argument optional.

    If the child cannot parse, the reader is restored and None is returned. The
    remaining arguments still get their chance at the same tokens. Escalations
    of a child fallback are wrapped and re-raised, never swallowed.
    Completion and every error message delegate to the child.
    """

    def __init__(self, argument, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__name__} can only wrap an argument")
        super().__init__(argument.name, display=argument.display_name)
        self._argument = _claim(self, argument)

    @property
    def argument(self):
        return self._argument

    def is_optional(self):
        return True

    def reduced_format(self):
        return self._argument.reduced_format()

    def missing_message(self):
        return self._argument.missing_message()

    def invalid_message(self, input, /):
        return self._argument.invalid_message(input)

    def requires_actor_message(self):
        return self._argument.requires_actor_message()

    def _parse_or_none(self, parser, reader):
        state = reader.create_snapshot()
        try:
            return parser()
        except FallbackEscalation as escalation:
            reader.restore_state(state)
            raise FallbackEscalation(self, escalation) from None
        except (ArgumentParseError, EndOfInputError):
            reader.restore_state(state)
            return None

    def parse_value(self, input, context, reader):
        return self._parse_or_none(lambda: self._argument.parse_value(input, context, reader), reader)

    def parse_fallback(self, input, context, reader, escalation, parsing_failed):
        if not isinstance(self._argument, FallbackArgument):
            raise TypeError(f"{type(self).__name__} wraps no fallback argument")
        return self._parse_or_none(
            lambda: self._argument.parse_fallback(input, context, reader, escalation.original, parsing_failed),
            reader
        )

    def complete(self, input, context, reader):
        return self._argument.complete(input, context, reader)


class DefaultValueFallback(FallbackArgument):
    """
    Falls back to a default value when the child cannot parse.

    Parsing first tries the child at its position. On failure it escalates, so
    a later argument may claim the token instead. If the later arguments then
    consume the whole input, or no input is left at its position, the default
    is used. Otherwise the child's original error is reported, since it explains
    the token better than a later argument would.

    Parameters
    - argument: Argument (wrapped child)
    - default: any value, or callable(input, context) -> value
    """

    def __init__(self, argument, default, /):
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__name__} can only wrap an argument")
        super().__init__(argument.name, display=argument.display_name)
        self._argument = _claim(self, argument)
        self._default = default

    @property
    def argument(self):
        return self._argument

    def is_optional(self):
        return True

    def reduced_format(self):
        return self._argument.reduced_format()

    def missing_message(self):
        return self._argument.missing_message()

    def invalid_message(self, input, /):
        return self._argument.invalid_message(input)

    def requires_actor_message(self):
        return self._argument.requires_actor_message()

    def parse_value(self, input, context, reader):
        state = reader.create_snapshot()
        try:
            return self._argument.parse_value(input, context, reader)
        except ArgumentParseError as error:
            reader.restore_state(state)
            raise FallbackEscalation(self, error) from None
        except EndOfInputError:
            reader.restore_state(state)
            raise FallbackEscalation(self, self.missing_error()) from None

    def fallback_value(self, input, context):
        if callable(self._default):
            return self._default(input, context)
        return self._default

    def parse_fallback(self, input, context, reader, escalation, parsing_failed):
        # An exhausted reader leaves nothing to blame on this argument.
        if parsing_failed and reader.has_next():
            raise escalation.root
        return self.fallback_value(input, context)

    def complete(self, input, context, reader):
        return self._argument.complete(input, context, reader)


__all__ = (
    "Argument",
    "StringArgument",
    "IntegerArgument",
    "FallbackArgument",
    "OptionalArgument",
    "DefaultValueFallback",
)
