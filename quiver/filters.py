"""
Argument filters: a predicate plus a rejection-message factory.

Filters are stateless and can be shared by any number of arguments. They are
applied after a value was parsed (or an object resolved, which may yield None),
and produce the ArgumentRejectedError raised by the argument on rejection.
"""
from .faults import ArgumentRejectedError
from .messages import Message, message
from .utils import Unset


class ArgumentFilter:
    """
    predicate over parsed values plus the message used when it rejects one.

    parameters
    - predicate: callable(value) -> bool
    - message: Unset | str | callable(argument, input, value) -> Message
      • Unset → the "argument-rejected" template.
      • str   → a template; {argument} and {input} are filled in.
      • callable → full control over the message.
    """
    __slots__ = ("_predicate", "_message")

    def __init__(self, predicate, /, message=Unset):
        if not callable(predicate):
            raise TypeError("filter predicate must be callable")
        if not (message is Unset or isinstance(message, str) or callable(message)):
            raise TypeError("filter message must be a template string or a callable")
        self._predicate = predicate
        self._message = message

    def test(self, value, /):
        return bool(self._predicate(value))

    def __call__(self, value, /):
        return self.test(value)

    def rejection_message(self, argument, input, value, /):
        if self._message is Unset:
            return message("argument-rejected", argument=argument.display_name, input=input)
        if isinstance(self._message, str):
            return Message(self._message, argument=argument.display_name, input=input)
        result = self._message(argument, input, value)
        if not isinstance(result, Message):
            raise TypeError("filter message factory must return a Message")
        return result

    def rejected_error(self, argument, input, value, /):
        return ArgumentRejectedError(argument, self.rejection_message(argument, input, value), input=input)

    def __and__(self, other):
        if not isinstance(other, ArgumentFilter):
            return NotImplemented

        def rejection(argument, input, value):
            # Report the first filter that rejects the value.
            culprit = self if not self.test(value) else other
            return culprit.rejection_message(argument, input, value)

        return ArgumentFilter(lambda value: self.test(value) and other.test(value), rejection)

    def __repr__(self):
        return f"{type(self).__name__}({self._predicate!r})"


_ACCEPT_ANY = ArgumentFilter(lambda value: True)

_EXISTING = ArgumentFilter(
    lambda value: value is not None,
    lambda argument, input, value: message("object-not-found", argument=argument.display_name, input=input)
)


def accept_any():
    """
    the shared filter accepting every value (including None).
    """
    return _ACCEPT_ANY


def existing():
    """
    the shared filter accepting anything but None (e.g. resolved objects).
    """
    return _EXISTING


__all__ = (
    "ArgumentFilter",
    "accept_any",
    "existing",
)
