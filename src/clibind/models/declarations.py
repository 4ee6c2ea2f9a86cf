"""Declarations that mark model classes and members as command-line elements.

Member declarations go inside ``typing.Annotated`` on annotated attributes, or
decorate methods and properties:

```python
@CommandLine("greet", description="Greets people")
@HelpOption("-h|--help")
class Greeting:
    loud: Annotated[bool, Option("-l|--loud", "Shout")] = False
    names: Annotated[list[str] | None, Argument(multiple=True)] = None

    @Option("--prefix <text>")
    def prefix(self, value: str) -> None:
        ...
```

Class declarations are stored on the class itself and are not inherited by
subclasses. Member declarations are stored on the decorated function (the
getter, for properties).
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from .enums import Arity, MemberKind

DECLARATIONS_ATTR = "__clibind_declarations__"


def member_declarations(member: Any) -> tuple["MemberDeclaration", ...]:
    """Return the declarations attached to a method, property or function."""
    target = _unwrap(member)
    return tuple(getattr(target, DECLARATIONS_ATTR, ()))


def class_declarations(cls: type) -> tuple["ClassDeclaration", ...]:
    """Return the declarations attached directly to ``cls`` (not its bases)."""
    return tuple(vars(cls).get(DECLARATIONS_ATTR, ()))


def _unwrap(member: Any) -> Any:
    if isinstance(member, property):
        return member.fget
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    return member


class MemberDeclaration:
    """Base for declarations placed on members."""

    kind: ClassVar[MemberKind]

    def __call__(self, member: Any) -> Any:
        target = _unwrap(member)
        setattr(target, DECLARATIONS_ATTR, (*getattr(target, DECLARATIONS_ATTR, ()), self))
        return member


class ClassDeclaration:
    """Base for declarations placed on model classes."""

    kind: ClassVar[MemberKind]

    def __call__(self, cls: type) -> type:
        setattr(cls, DECLARATIONS_ATTR, (*vars(cls).get(DECLARATIONS_ATTR, ()), self))
        return cls


@dataclass(frozen=True)
class CommandLine(ClassDeclaration):
    """Names and behavior of the command a model class binds to."""

    kind: ClassVar[MemberKind] = MemberKind.COMMAND_LINE

    name: str | None = None
    full_name: str | None = None
    description: str | None = None
    allow_argument_separator: bool = False
    throw_on_unexpected_arg: bool = True


@dataclass(frozen=True)
class HelpOption(ClassDeclaration):
    """Help toggle, e.g. ``-?|-h|--help``."""

    kind: ClassVar[MemberKind] = MemberKind.HELP

    template: str


@dataclass(frozen=True)
class VersionOption(ClassDeclaration):
    """
    Version toggle, e.g. ``-v|--version``.

    Static versions are used unless the model declares version getters.
    """

    kind: ClassVar[MemberKind] = MemberKind.VERSION

    template: str
    short_version: str | None = None
    long_version: str | None = None


@dataclass(frozen=True)
class Option(MemberDeclaration):
    """
    Named option.

    When ``arity`` is None it is inferred from the member: ``str`` takes one
    value, a sequence of ``str`` takes many, ``bool`` takes none.
    """

    kind: ClassVar[MemberKind] = MemberKind.OPTION

    template: str | None = None
    description: str | None = None
    arity: Arity | None = None
    inherited: bool = False


@dataclass(frozen=True)
class Argument(MemberDeclaration):
    """Positional argument, consumed in declaration order."""

    kind: ClassVar[MemberKind] = MemberKind.ARGUMENT

    name: str | None = None
    description: str | None = None
    multiple: bool | None = None


@dataclass(frozen=True)
class Command(MemberDeclaration):
    """
    Sub-command bound to a child model.

    The child model type comes from the member annotation, or from ``model``
    for handlers that take no parameter.
    """

    kind: ClassVar[MemberKind] = MemberKind.COMMAND

    name: str | None = None
    throw_on_unexpected_arg: bool | None = None
    model: type | None = None


@dataclass(frozen=True)
class RemainingArguments(MemberDeclaration):
    """Captures every token not consumed by options, arguments or sub-commands."""

    kind: ClassVar[MemberKind] = MemberKind.REMAINING_ARGUMENTS

    skip_if_empty: bool = False


@dataclass(frozen=True)
class ShortVersionGetter(MemberDeclaration):
    kind: ClassVar[MemberKind] = MemberKind.SHORT_VERSION_GETTER


@dataclass(frozen=True)
class LongVersionGetter(MemberDeclaration):
    kind: ClassVar[MemberKind] = MemberKind.LONG_VERSION_GETTER
