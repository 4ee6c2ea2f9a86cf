"""Declarations, resolved specs and configuration for model binding."""

from .config import BinderConfig
from .declarations import (
    Argument,
    Command,
    CommandLine,
    HelpOption,
    LongVersionGetter,
    Option,
    RemainingArguments,
    ShortVersionGetter,
    VersionOption,
)
from .enums import Arity, LifecycleState, MemberKind, TargetStyle
from .specs import (
    ArgumentSpec,
    BindingTarget,
    CommandLineSpec,
    CommandSpec,
    HelpSpec,
    HookSpec,
    MemberSpec,
    ModelDescriptor,
    OptionSpec,
    RemainingArgsSpec,
    VersionSpec,
)

__all__ = [
    # Declarations
    "Argument",
    "Command",
    "CommandLine",
    "HelpOption",
    "LongVersionGetter",
    "Option",
    "RemainingArguments",
    "ShortVersionGetter",
    "VersionOption",
    # Enums
    "Arity",
    "LifecycleState",
    "MemberKind",
    "TargetStyle",
    # Specs
    "ArgumentSpec",
    "BindingTarget",
    "CommandLineSpec",
    "CommandSpec",
    "HelpSpec",
    "HookSpec",
    "MemberSpec",
    "ModelDescriptor",
    "OptionSpec",
    "RemainingArgsSpec",
    "VersionSpec",
    # Config
    "BinderConfig",
]
