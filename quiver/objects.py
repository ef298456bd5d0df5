r"""
Object arguments: bridge identifier arguments to live domain objects.

Overview
- ObjectIdArgument[_I]: parses an identifier through a wrapped identifier
  argument, applies an id filter, and completes partial input from candidate
  ids supplied by an injected `suggestions` callable (or an overriding
  completion_candidates method).
- ObjectUUIDArgument: ObjectIdArgument over UUIDArgument.
- ObjectByIdArgument[_I, _O]: resolves the parsed id to an object through an
  object source and applies an object filter; suggestions come from the live
  objects (targeted ones first).
- ObjectByUUIDArgument[_O]: UUID specialisation.
- TargetedObjectFallback: falls back to the object targeted by the actor.

Object sources (duck-typed; see ObjectSource in objects.pyi)
- resolve(id) -> object | None          fast, synchronous, no side effects
- all_objects() -> Iterable[object]     possibly large; only scanned once the
                                        typed prefix reaches the minimum length
- targeted_objects(actor) -> Sequence   contextually relevant objects, always
                                        offered first
- identify(object) -> id

Split identifiers
- When the canonical string form of an identifier contains the argument
  separator, the typed prefix spans several tokens. The prefix is rebuilt by
  joining them, and suggestions only carry the part after the tokens already typed.
"""
import itertools

from .arguments import Argument, DefaultValueFallback
from .faults import ArgumentParseError, EndOfInputError, MissingArgumentError
from .filters import ArgumentFilter, accept_any, existing
from .identifiers import IdentifierArgument, UUIDArgument
from .messages import message
from .utils import *


def _check_filter(owner, filter):
    if filter is Unset:
        return Unset
    if not isinstance(filter, ArgumentFilter):
        raise TypeError(f"{type(owner).__name__} filter must be an ArgumentFilter")
    return filter


def _check_minimum(owner, minimum_completion_input):
    if not isinstance(minimum_completion_input, int) or isinstance(minimum_completion_input, bool):
        raise TypeError(f"{type(owner).__name__} 'minimum_completion_input' must be an integer")
    if minimum_completion_input < 0:
        raise ValueError(f"{type(owner).__name__} 'minimum_completion_input' cannot be negative")
    return minimum_completion_input


class ObjectIdArgument[_I](Argument):
    """
    Accepts identifiers parsed by `id_argument` and accepted by `filter`.

    Parameters
    - id_argument: Argument, parses the identifier (its errors propagate as-is).
    - filter: Unset | ArgumentFilter over ids (defaults to accepting any).
    - minimum_completion_input: int >= 0
      Prefix length from which suggestion suppliers scan all candidates. The
      supplier receives it and may ignore it for some suggestions (targeted
      objects). 0 disables the gate.
    - suggestions: Unset | callable(input, context, minimum_completion_input, prefix)
      -> Iterable[_I], yielding candidate ids matching the prefix.
    - formatter: Unset | callable(id) -> str, canonical string form (defaults
      to the identifier argument's to_string()).
    """

    def __init__(
            self,
            name,
            id_argument,
            /,
            filter=Unset,
            minimum_completion_input=0,
            *,
            suggestions=Unset,
            formatter=Unset,
            display=Unset
    ):
        super().__init__(name, display=display)
        if not isinstance(id_argument, Argument):
            raise TypeError(f"{type(self).__name__} id argument must be an argument")
        if not (suggestions is Unset or callable(suggestions)):
            raise TypeError(f"{type(self).__name__} 'suggestions' must be callable")
        if not (formatter is Unset or callable(formatter)):
            raise TypeError(f"{type(self).__name__} 'formatter' must be callable")
        self._filter = nullify(_check_filter(self, filter), accept_any())
        self._minimum_completion_input = _check_minimum(self, minimum_completion_input)
        self._suggestions = suggestions
        self._formatter = formatter
        self._id_argument = id_argument
        id_argument.set_parent(self)

    @property
    def id_argument(self):
        return self._id_argument

    @property
    def filter(self):
        return self._filter

    @property
    def minimum_completion_input(self):
        return self._minimum_completion_input

    def parse_value(self, input, context, reader):
        # This argument's missing message wins over the id argument's.
        if not reader.has_next():
            raise self.missing_error()
        state = reader.create_snapshot()
        id = self._id_argument.parse_value(input, context, reader)
        if not self._filter.test(id):
            raw = join(reader.consumed_since(state))
            reader.restore_state(state)
            raise self._filter.rejected_error(self, raw, id)
        return id

    def to_string(self, id, /):
        if self._formatter is not Unset:
            return self._formatter(id)
        if isinstance(self._id_argument, IdentifierArgument):
            return self._id_argument.to_string(id)
        return str(id)

    def complete(self, input, context, reader):
        if reader.remaining_count() == 0:
            return []

        state = reader.create_snapshot()
        try:
            self._id_argument.parse_value(input, context, reader)
        except (ArgumentParseError, EndOfInputError):
            pass
        else:
            if reader.has_next():
                # The id is complete; a later argument owns the last token.
                reader.restore_state(state)
                return []
        reader.restore_state(state)

        # The partial id may consist of several joined tokens.
        tokens = reader.remaining()
        return self.complete_prefix(input, context, join(tokens), len(tokens))

    def complete_prefix(self, input, context, prefix, count):
        """
        suggestions for `prefix`, which was typed as `count` (>= 1) tokens.
        """
        suggestions = []
        for id in self.completion_candidates(input, context, prefix):
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
            if not self._filter.test(id):
                continue
            string = self.to_string(id)
            if not string:
                continue
            # Only suggest what follows the already typed leading tokens.
            if count > 1:
                parts = string.split(ARGUMENTS_SEPARATOR, count - 1)
                if len(parts) == count:
                    string = parts[-1]
            suggestions.append(string)
        return suggestions

    def completion_candidates(self, input, context, prefix):
        """
        candidate ids for `prefix` (may be empty, never None).
        """
        if self._suggestions is Unset:
            return ()
        return self._suggestions(input, context, self._minimum_completion_input, prefix)


class ObjectUUIDArgument(ObjectIdArgument):
    """
    Accepts UUIDs identifying some type of objects.
    """
    DEFAULT_MINIMUM_COMPLETION_INPUT = 3

    def __init__(
            self,
            name,
            /,
            filter=Unset,
            minimum_completion_input=DEFAULT_MINIMUM_COMPLETION_INPUT,
            *,
            suggestions=Unset,
            display=Unset
    ):
        super().__init__(
            name,
            UUIDArgument(name + ":uuid", display=nullify(display, name)),
            filter,
            minimum_completion_input,
            suggestions=suggestions,
            display=display
        )


class ObjectByIdArgument[_I, _O](Argument):
    """
    Resolves an identifier to a live object.

    Parsing
    - the identifier is parsed by the id argument from create_id_argument();
      its syntax errors propagate unchanged.
    - the id is resolved through source.resolve(). An absent object (None) is
      not an error by itself: the filter decides. The default filter,
      existing(), rejects it.
    - on rejection the cursor is restored and ArgumentRejectedError carries the
      raw consumed text (not the parsed id).

    Completion
    - delegated to the id argument, whose candidates come from
      completion_candidates(): targeted objects of the actor first, regardless
      of the prefix length, then all other objects once the prefix reaches the
      minimum completion input.
    """

    def __init__(self, name, source, /, filter=Unset, minimum_completion_input=0, *, display=Unset):
        super().__init__(name, display=display)
        for method in ("resolve", "all_objects", "targeted_objects", "identify"):
            if not callable(getattr(source, method, None)):
                raise TypeError(f"{type(self).__name__} source must provide {method}()")
        self._source = source
        self._filter = nullify(_check_filter(self, filter), existing())
        self._id_argument = self.create_id_argument(name + ":id", _check_minimum(self, minimum_completion_input))
        if not isinstance(self._id_argument, ObjectIdArgument):
            raise TypeError(f"{type(self).__name__} id argument must be an object id argument")
        self._id_argument.set_parent(self)

    @property
    def source(self):
        return self._source

    @property
    def filter(self):
        return self._filter

    @property
    def id_argument(self):
        return self._id_argument

    def create_id_argument(self, name, minimum_completion_input):
        """
        build the id argument; implementations inject completion_candidates as
        its `suggestions` supplier.
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement create_id_argument()")

    def resolve(self, input, context, id):
        return self._source.resolve(id)

    def parse_value(self, input, context, reader):
        if not reader.has_next():
            raise self.missing_error()
        state = reader.create_snapshot()
        id = self._id_argument.parse_value(input, context, reader)
        object = self.resolve(input, context, id)
        if not self._filter.test(object):
            raw = join(reader.consumed_since(state))
            reader.restore_state(state)
            raise self._filter.rejected_error(self, raw, object)
        return object

    def complete(self, input, context, reader):
        return self._id_argument.complete(input, context, reader)

    def completion_candidates(self, input, context, minimum_completion_input, prefix):
        """
        ids of accepted objects whose canonical form starts with `prefix`.
        """
        normalized = prefix.casefold()
        targeted = [] if input.actor is None else list(self._source.targeted_objects(input.actor))
        candidates = iter(targeted)

        # Only scan every object once there is a minimum sized input.
        if len(prefix) >= minimum_completion_input:
            candidates = itertools.chain(
                candidates,
                (object for object in self._source.all_objects() if object not in targeted)
            )

        for object in candidates:
            if not self._filter.test(object):
                continue
            id = self._source.identify(object)
            if self._id_argument.to_string(id).casefold().startswith(normalized):
                yield id


class ObjectByUUIDArgument[_O](ObjectByIdArgument):
    """
    Resolves a UUID to a live object.
    """
    DEFAULT_MINIMUM_COMPLETION_INPUT = ObjectUUIDArgument.DEFAULT_MINIMUM_COMPLETION_INPUT

    def __init__(
            self,
            name,
            source,
            /,
            filter=Unset,
            minimum_completion_input=DEFAULT_MINIMUM_COMPLETION_INPUT,
            *,
            display=Unset
    ):
        super().__init__(name, source, filter, minimum_completion_input, display=display)

    def create_id_argument(self, name, minimum_completion_input):
        return ObjectUUIDArgument(
            name,
            accept_any(),
            minimum_completion_input,
            suggestions=self.completion_candidates,
            display=self.display_name
        )


class TargetedObjectFallback(DefaultValueFallback):
    """
    Falls back to the first object targeted by the actor.

    Requires an actor; an input without one fails with RequiresActorError. When
    no targeted object passes the argument's filter, a MissingArgumentError with
    the "missing-target" message is raised.
    """

    def __init__(self, argument, /):
        if not isinstance(argument, ObjectByIdArgument):
            raise TypeError(f"{type(self).__name__} can only wrap an object argument")
        super().__init__(argument, Unset)

    def fallback_value(self, input, context):
        if input.actor is None:
            raise self.requires_actor_error()
        for object in self.argument.source.targeted_objects(input.actor):
            if object is not None and self.argument.filter.test(object):
                return object
        raise MissingArgumentError(self, message("missing-target", argument=self.display_name))


__all__ = (
    "ObjectIdArgument",
    "ObjectUUIDArgument",
    "ObjectByIdArgument",
    "ObjectByUUIDArgument",
    "TargetedObjectFallback",
)
