"""
Quiver faults (errors, warnings and parse signals) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by
  domain so logs and docs stay searchable.
- CommandException: base of everything the engine raises at the user. Carries a
  Message template plus options and knows how to render itself with rich.
- ArgumentParseError and its subclasses: argument-scoped failures that carry the
  offending argument and the raw consumed input.
- FallbackEscalation: not a failure; an argument asking for a second pass after
  the later arguments ran. Optional arguments never swallow it.
- CommandWarning: non-fatal issues (e.g. alias collisions), emitted through the
  warnings machinery outside shell mode.
- trigger(): central entry point to surface a fault (raise, warn, or print).

Taxonomy
- EndOfInputError        reader exhausted (not argument-scoped)
- MissingArgumentError   the argument's turn came but no token was available
- InvalidArgumentError   token present, does not match the expected shape
- ArgumentRejectedError  token parses, value fails a filter
- RequiresActorError     the argument needs an actor and the input has none
- UnexpectedTokensError  tokens left over after every argument ran
- FallbackEscalation     second-pass request (see arguments.FallbackArgument)

Host integration
- __codes__ in __main__ remaps codes to labels (FaultCode.normalize()).
- __docs__ in __main__ maps codes to documentation (getdoc()).
- __styles__ in __main__ overrides render styles; __prog__ overrides the
  program name shown in headers.
"""
import copy
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .messages import Message

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - input (1110x): END_OF_INPUT, UNEXPECTED_TOKENS
    - arguments (1120x): MISSING_ARGUMENT, INVALID_ARGUMENT, ARGUMENT_REJECTED,
      REQUIRES_ACTOR
    - signals (1130x): FALLBACK_ESCALATION
    - warnings (121xx): ALIAS_COLLISION
    """
    # --- input errors (11xxx) ---
    END_OF_INPUT        = 11101
    UNEXPECTED_TOKENS   = 11102

    # --- argument errors (11xxx) ---
    MISSING_ARGUMENT    = 11201
    INVALID_ARGUMENT    = 11202
    ARGUMENT_REJECTED   = 11203
    REQUIRES_ACTOR      = 11204

    # --- signals (11xxx) ---
    FALLBACK_ESCALATION = 11301

    # --- warnings (12xxx) ---
    ALIAS_COLLISION     = 12101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host can provide a __codes__ mapping in __main__ to override numeric
        ids with friendlier labels; otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    tool = fault.options.get("tool")
    prog = text(getattr(main, "__prog__", tool.root.name if tool is not None else "quiver"), "prog-name")
    title = fault.options.get("title", type(fault).__title__)

    header = Text.assemble(
        "[ ",
        prog,
        " - ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(title.title(), kind + "-title"),
        " ]"
    )
    message = text(fault.message.render(), kind + "-message")
    renders = [message]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class CommandException(Exception):
    """
    base type for user-facing errors.

    options (all optional)
    - code, title, hint: override the class defaults shown in the header.
    - input: raw text the user typed for the failing part.
    - tool: the Command the fault surfaced from (header program name).
    - shell: print instead of raising when triggered.
    - colorful, fancy: rendering switches.
    """
    __code__ = FaultCode.INVALID_ARGUMENT
    __title__ = "command error"

    def __init__(self, message, /, **options):
        if not isinstance(message, Message):
            raise TypeError(f"{type(self).__name__} message must be a Message")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    def __str__(self):
        return self.message.render()

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EndOfInputError(CommandException):
    __code__ = FaultCode.END_OF_INPUT
    __title__ = "end of input"


class ArgumentParseError(CommandException):
    """
    argument-scoped parse failure.

    attributes
    - argument: the argument that failed (None for command-level leftovers).
    - input: raw consumed text, joined with the argument separator (option).
    """
    __title__ = "invalid argument"

    def __init__(self, argument, message, /, **options):
        super().__init__(message, **options)
        self.argument = argument

    @property
    def input(self):
        return self.options.get("input")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.argument, self.message, **{**self.options, **overrides})


class MissingArgumentError(ArgumentParseError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"


class InvalidArgumentError(ArgumentParseError):
    __code__ = FaultCode.INVALID_ARGUMENT
    __title__ = "invalid argument"


class ArgumentRejectedError(ArgumentParseError):
    __code__ = FaultCode.ARGUMENT_REJECTED
    __title__ = "argument rejected"


class RequiresActorError(ArgumentParseError):
    __code__ = FaultCode.REQUIRES_ACTOR
    __title__ = "actor required"


class UnexpectedTokensError(ArgumentParseError):
    __code__ = FaultCode.UNEXPECTED_TOKENS
    __title__ = "unexpected input"


class FallbackEscalation(ArgumentParseError):
    """
    signal: `argument` could not parse at its position and asks the command to
    retry it after the later arguments have run.

    `original` is the error the argument would have raised otherwise (or, for
    wrappers such as OptionalArgument, the wrapped escalation). The message and
    input are taken from it so that rendering an unresolved escalation shows the
    underlying problem.
    """
    __code__ = FaultCode.FALLBACK_ESCALATION
    __title__ = "fallback"

    def __init__(self, argument, original, /, **options):
        if not isinstance(original, ArgumentParseError):
            raise TypeError("fallback escalation must wrap an argument parse error")
        super().__init__(argument, original.message, **({"input": original.input} | options))
        self.original = original

    @property
    def root(self):
        """
        the innermost error behind any chain of wrapped escalations.
        """
        error = self.original
        while isinstance(error, FallbackEscalation):
            error = error.original
        return error

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.argument, self.original, **{**self.options, **overrides})


class DuplicateEscalationError(RuntimeError):
    """
    fatal: the same argument escalated twice within one parsing pass.
    """


class CommandWarning(Warning):
    __code__ = FaultCode.ALIAS_COLLISION
    __title__ = "command warning"

    def __init__(self, message, /, **options):
        if not isinstance(message, Message):
            raise TypeError(f"{type(self).__name__} message must be a Message")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    def __str__(self):
        return self.message.render()

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",

            # body
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AliasCollisionWarning(CommandWarning):
    __code__ = FaultCode.ALIAS_COLLISION
    __title__ = "alias collision"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into a copy of the fault via copy.replace().
    - errors raise outside shell mode and print inside it; warnings are emitted
      through warnings.warn outside shell mode and print inside it.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation lookup for a fault code through __docs__ in __main__.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "EndOfInputError",
    "ArgumentParseError",
    "MissingArgumentError",
    "InvalidArgumentError",
    "ArgumentRejectedError",
    "RequiresActorError",
    "UnexpectedTokensError",
    "FallbackEscalation",
    "DuplicateEscalationError",
    "CommandWarning",
    "AliasCollisionWarning",
    "trigger",
    "getdoc",
)
