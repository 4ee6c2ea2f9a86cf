"""Resolved metadata for one model type.

Declarations say what the author wrote; specs say what will be registered.
A spec has every default filled in, arity inferred, and its binding target
classified, so the tree builder never has to inspect the model type again.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import Arity, MemberKind, TargetStyle


class BindingTarget(BaseModel):
    """The model member a parsed value is delivered to."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(description="Attribute, property or method name on the model")
    style: TargetStyle
    value_type: Any = Field(default=None, description="Annotation of the delivered value")
    takes_value: bool = Field(default=True, description="Handler receives the value")
    takes_context: bool = Field(default=False, description="Handler receives the BindingNode too")
    spreads_values: bool = Field(default=False, description="Handler declares *values")
    on_bind: str | None = Field(default=None, description="Configuration hook run at registration")


class OptionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[MemberKind.OPTION] = MemberKind.OPTION
    template: str
    description: str = ""
    arity: Arity
    inherited: bool = False
    target: BindingTarget


class ArgumentSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[MemberKind.ARGUMENT] = MemberKind.ARGUMENT
    name: str
    description: str = ""
    multiple: bool = False
    target: BindingTarget


class CommandSpec(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    kind: Literal[MemberKind.COMMAND] = MemberKind.COMMAND
    name: str
    throw_on_unexpected_arg: bool | None = None
    model_type: Any = Field(description="Class instantiated for the child node")
    target: BindingTarget


class RemainingArgsSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[MemberKind.REMAINING_ARGUMENTS] = MemberKind.REMAINING_ARGUMENTS
    skip_if_empty: bool = False
    target: BindingTarget


MemberSpec = Annotated[
    OptionSpec | ArgumentSpec | CommandSpec | RemainingArgsSpec,
    Field(discriminator="kind"),
]


class CommandLineSpec(BaseModel):
    """Class-level naming and parsing behavior, with defaults applied."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    full_name: str = ""
    description: str = ""
    allow_argument_separator: bool = False
    throw_on_unexpected_arg: bool = True


class HelpSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    template: str


class VersionSpec(BaseModel):
    """
    Version toggle with its sources resolved.

    Getters take precedence over static strings slot by slot. The long form
    falls back to the short form, never the reverse.
    """

    model_config = ConfigDict(frozen=True)

    template: str
    short_version: str | None = None
    long_version: str | None = None
    short_getter: BindingTarget | None = None
    long_getter: BindingTarget | None = None

    @property
    def is_renderable(self) -> bool:
        """True when at least one version source exists."""
        return any(
            source is not None
            for source in (self.short_version, self.long_version, self.short_getter, self.long_getter)
        )


class HookSpec(BaseModel):
    """A lifecycle hook resolved by name when the model type is described."""

    model_config = ConfigDict(frozen=True)

    name: str
    takes_command: bool = False


class ModelDescriptor(BaseModel):
    """Everything the tree builder needs to bind one model type."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    model_type: Any
    command_line: CommandLineSpec = Field(default_factory=CommandLineSpec)
    help: HelpSpec | None = None
    version: VersionSpec | None = None
    members: list[MemberSpec] = Field(default_factory=list)
    on_init: HookSpec | None = None
    on_exec: HookSpec | None = None

    @property
    def remaining_arguments(self) -> RemainingArgsSpec | None:
        """The single remaining-arguments capture, if declared."""
        for member in self.members:
            if isinstance(member, RemainingArgsSpec):
                return member
        return None
