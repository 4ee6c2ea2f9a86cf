"""clibind: bind annotated model classes to click command trees."""

__version__ = "0.1.0"

# Declarations
from .models import (
    Argument,
    Arity,
    BinderConfig,
    Command,
    CommandLine,
    HelpOption,
    LongVersionGetter,
    Option,
    RemainingArguments,
    ShortVersionGetter,
    VersionOption,
)

# Binding
from .binder import BindingNode, CommandLineBinding, EmptyCommand, bind_model

# Engine
from .engine import ArgumentHandle, CommandHandle, OptionHandle

__all__ = [
    "Argument",
    "ArgumentHandle",
    "Arity",
    "BinderConfig",
    "BindingNode",
    "Command",
    "CommandHandle",
    "CommandLine",
    "CommandLineBinding",
    "EmptyCommand",
    "HelpOption",
    "LongVersionGetter",
    "Option",
    "OptionHandle",
    "RemainingArguments",
    "ShortVersionGetter",
    "VersionOption",
    "bind_model",
]
