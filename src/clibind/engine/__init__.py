"""Click adapter: command handles and option templates."""

from .command import ArgumentHandle, CommandHandle, OptionHandle
from .templates import OptionTemplate, parse_option_template

__all__ = [
    "ArgumentHandle",
    "CommandHandle",
    "OptionHandle",
    "OptionTemplate",
    "parse_option_template",
]
