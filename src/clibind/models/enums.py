"""Enumerations for binding metadata and lifecycle."""

from enum import Enum


class Arity(str, Enum):
    """Value cardinality of an option or argument."""

    FLAG = "flag"  # No value, presence only
    SINGLE = "single"  # Exactly one value
    MULTIPLE = "multiple"  # Zero or more values, in command-line order


class MemberKind(str, Enum):
    """Kinds of declarations a model class or member can carry."""

    COMMAND_LINE = "command_line"
    HELP = "help"
    VERSION = "version"
    OPTION = "option"
    ARGUMENT = "argument"
    COMMAND = "command"
    REMAINING_ARGUMENTS = "remaining_arguments"
    SHORT_VERSION_GETTER = "short_version_getter"
    LONG_VERSION_GETTER = "long_version_getter"


class TargetStyle(str, Enum):
    """How a parsed value reaches the model."""

    ATTRIBUTE = "attribute"  # Annotated attribute, assigned with setattr
    PROPERTY = "property"  # Property, assigned through its setter
    METHOD = "method"  # Invocable handler


class LifecycleState(str, Enum):
    """Lifecycle of one binding node. Transitions are linear and one-shot."""

    UNBOUND = "unbound"
    BUILT = "built"
    EXECUTING = "executing"
    POST_EXECUTED = "post_executed"
