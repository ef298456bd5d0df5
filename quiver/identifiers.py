"""
Identifier arguments: single tokens with a fixed, format-specific grammar.

The check is purely syntactic; whether any object carries the identifier is
decided elsewhere (see quiver.objects). Identifier arguments offer no
completions of their own: knowing the format does not tell which identifiers
are worth suggesting.
"""
import re
from uuid import UUID

from .arguments import Argument
from .messages import message
from .utils import Unset

_UUID = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


class IdentifierArgument[_I](Argument):
    """
    Parses exactly one token matching `pattern` (full match) through `convert`.

    Parameters
    - pattern: str | re.Pattern, the token grammar.
    - convert: callable(token) -> identifier; ValueError/TypeError count as invalid.
    - message_key: template key used for invalid tokens.

    On failure the cursor is left untouched.
    """

    def __init__(self, name, pattern, convert, /, message_key="invalid-argument", *, display=Unset):
        super().__init__(name, display=display)
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        if not isinstance(pattern, re.Pattern):
            raise TypeError(f"{type(self).__name__} pattern must be a string or a compiled pattern")
        if not callable(convert):
            raise TypeError(f"{type(self).__name__} converter must be callable")
        self._pattern = pattern
        self._convert = convert
        self._message_key = message_key

    @property
    def pattern(self):
        return self._pattern

    def invalid_message(self, input, /):
        return message(self._message_key, argument=self.display_name, input=input)

    def parse_value(self, input, context, reader):
        if (token := reader.peek()) is None:
            raise self.missing_error()
        if not self._pattern.fullmatch(token):
            raise self.invalid_error(token)
        try:
            value = self._convert(token)
        except (TypeError, ValueError):
            raise self.invalid_error(token) from None
        reader.next()
        return value

    def to_string(self, value, /):
        """
        canonical string form of an identifier.
        """
        return str(value)


class UUIDArgument(IdentifierArgument[UUID]):
    """
    Parses a UUID in its 8-4-4-4-12 hexadecimal form (any letter case).

    The canonical form is the lowercase str(uuid).
    """

    def __init__(self, name, /, *, display=Unset):
        super().__init__(name, _UUID, UUID, "invalid-uuid", display=display)


__all__ = (
    "IdentifierArgument",
    "UUIDArgument",
)
