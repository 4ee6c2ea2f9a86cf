"""Value-shape and handler-signature inference.

Everything here runs once per model type, while the descriptor is built.
Nothing is inspected again at parse time.
"""

import collections.abc
import inspect
import types
import typing
from typing import Annotated, Any, Union

from clibind.exceptions import UnsupportedSignatureError
from clibind.models.enums import Arity

from .node import BindingNode

# Origins accepted as "sequence of strings"
SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def unwrap_annotated(annotation: Any) -> Any:
    """Strip ``Annotated[...]`` metadata."""
    while typing.get_origin(annotation) is Annotated:
        annotation = annotation.__origin__
    return annotation


def strip_optional(annotation: Any) -> Any:
    """Turn ``X | None`` into ``X``; any other annotation is returned as is."""
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_any(annotation: Any) -> bool:
    return annotation is Any or annotation is inspect.Parameter.empty or annotation is None


def _is_string_sequence(annotation: Any) -> bool:
    origin = typing.get_origin(annotation) or annotation
    if origin not in SEQUENCE_ORIGINS:
        return False
    args = typing.get_args(annotation)
    if not args:
        return True
    if origin is tuple:
        element_types = args[:1] if args[-1] is Ellipsis else args
        return all(arg is str or arg is Any for arg in element_types)
    return len(args) == 1 and (args[0] is str or args[0] is Any)


def infer_arity(annotation: Any) -> Arity | None:
    """
    Infer the arity of a value from its annotation.

    ``str`` (and unannotated values) take a single value, sequences of
    ``str`` take many, ``bool`` and ``bool | None`` take none.

    Returns:
        The inferred Arity, or None when the shape cannot be bound
    """
    annotation = unwrap_annotated(annotation)
    if _is_any(annotation):
        return Arity.SINGLE

    annotation = strip_optional(annotation)
    if annotation is str:
        return Arity.SINGLE
    if annotation is bool:
        return Arity.FLAG
    if _is_string_sequence(annotation):
        return Arity.MULTIPLE
    return None


def is_string_type(annotation: Any) -> bool:
    """True for ``str``, ``str | None`` and unannotated values."""
    annotation = unwrap_annotated(annotation)
    return _is_any(annotation) or strip_optional(annotation) is str


def sequence_factory(annotation: Any) -> type:
    """Container used to deliver multiple values: tuple for tuple annotations, else list."""
    annotation = strip_optional(unwrap_annotated(annotation))
    origin = typing.get_origin(annotation) or annotation
    return tuple if origin is tuple else list


def model_class(annotation: Any) -> type | None:
    """The class a sub-command annotation refers to, if any."""
    annotation = strip_optional(unwrap_annotated(annotation))
    if _is_any(annotation) or typing.get_origin(annotation) is not None:
        return None
    return annotation if isinstance(annotation, type) else None


def is_handler(member: Any) -> bool:
    """True for functions, staticmethods and classmethods found in a class body."""
    return inspect.isfunction(member) or isinstance(member, (staticmethod, classmethod))


def handler_parameters(member: Any) -> list[inspect.Parameter]:
    """Parameters of a class-body handler, without ``self`` or ``cls``."""
    func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
    parameters = list(inspect.signature(func).parameters.values())
    if not isinstance(member, staticmethod):
        parameters = parameters[1:]
    return parameters


def handler_hints(member: Any) -> dict[str, Any]:
    """Resolved parameter annotations of a class-body handler."""
    func = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
    return typing.get_type_hints(func, include_extras=True)


def check_parameter_count(
    model_name: str,
    member_name: str,
    parameters: list[inspect.Parameter],
    element: str,
    minimum: int,
    maximum: int,
) -> None:
    """
    Reject handlers whose parameter list cannot be called by the binder.

    Raises:
        UnsupportedSignatureError: If the count is out of range, or a
            parameter is keyword-only or ``**kwargs``
    """
    expected = (
        f"{minimum} parameter(s)" if minimum == maximum else f"{minimum} to {maximum} parameters"
    )
    count = len(parameters)
    if not minimum <= count <= maximum:
        raise UnsupportedSignatureError(model_name, member_name, count, element, expected)
    for index, parameter in enumerate(parameters):
        if parameter.kind in _POSITIONAL:
            continue
        # *values is accepted as the only parameter
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL and index == 0 and count == 1:
            continue
        raise UnsupportedSignatureError(model_name, member_name, count, element, expected)


def is_context_parameter(parameter: inspect.Parameter, hints: dict[str, Any]) -> bool:
    """True if ``parameter`` can receive the enclosing BindingNode."""
    annotation = unwrap_annotated(hints.get(parameter.name, inspect.Parameter.empty))
    if _is_any(annotation):
        return True
    origin = typing.get_origin(annotation) or annotation
    return isinstance(origin, type) and issubclass(origin, BindingNode)
