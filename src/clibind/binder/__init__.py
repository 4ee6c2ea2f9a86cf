"""Model binding: descriptor walk, inference, tree building and lifecycle."""

from .builder import CommandLineBinding, bind_model
from .descriptor import EmptyCommand, describe
from .inference import infer_arity
from .node import BindingNode

__all__ = [
    "BindingNode",
    "CommandLineBinding",
    "EmptyCommand",
    "bind_model",
    "describe",
    "infer_arity",
]
