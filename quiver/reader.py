"""
Cursor over the already-split input tokens.

The reader owns an immutable tuple of tokens and a cursor pointing at the last
consumed token (-1 before the first one). Snapshots copy the cursor only; the
tokens are shared and read-only, which makes backtracking cheap.

One parse or completion attempt owns a reader at a time; readers are not
thread-safe.
"""
from typing import NamedTuple

from .faults import EndOfInputError
from .messages import message


class ReaderState(NamedTuple):
    """
    opaque reader snapshot (the cursor plus the token tuple it belongs to).
    """
    tokens: tuple
    cursor: int


class ArgumentsReader:
    __slots__ = ("_tokens", "_cursor")

    def __init__(self, tokens=(), /):
        tokens = tuple(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("reader tokens must be strings")
        self._tokens = tokens
        self._cursor = -1

    @property
    def tokens(self):
        return self._tokens

    @property
    def cursor(self):
        return self._cursor

    def has_next(self):
        return self._cursor + 1 < len(self._tokens)

    def next(self):
        """
        advance the cursor and return the token under it.

        raises EndOfInputError when no token remains (cursor unchanged).
        """
        if not self.has_next():
            raise EndOfInputError(message("end-of-input"), cursor=self._cursor)
        self._cursor += 1
        return self._tokens[self._cursor]

    def peek(self):
        """
        return the next token without consuming it, or None at the end.
        """
        if not self.has_next():
            return None
        return self._tokens[self._cursor + 1]

    def remaining_count(self):
        return len(self._tokens) - self._cursor - 1

    def remaining(self):
        return self._tokens[self._cursor + 1:]

    def consumed_since(self, state, /):
        """
        tokens consumed between `state` and the current cursor.
        """
        self._check(state)
        return self._tokens[state.cursor + 1:self._cursor + 1]

    def create_snapshot(self):
        return ReaderState(self._tokens, self._cursor)

    def restore_state(self, state, /):
        self._check(state)
        self._cursor = state.cursor

    def _check(self, state):
        if not isinstance(state, ReaderState):
            raise TypeError("reader state must come from create_snapshot()")
        if state.tokens is not self._tokens:
            raise ValueError("reader state belongs to another input")

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"{type(self).__name__}(tokens={self._tokens!r}, cursor={self._cursor!r})"


__all__ = (
    "ReaderState",
    "ArgumentsReader",
)
