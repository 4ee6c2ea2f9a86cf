"""Binder configuration model."""

from pydantic import BaseModel, ConfigDict, Field


class BinderConfig(BaseModel):
    """Names and texts the binder uses when describing and registering models."""

    model_config = ConfigDict(frozen=True)

    on_init_hook: str = Field(
        default="on_init",
        description="Model method invoked once the command is configured, before parsing",
    )
    on_exec_hook: str = Field(
        default="on_exec",
        description="Model method invoked after values are applied; may return an exit code",
    )
    on_bind_suffix: str = Field(
        default="_on_bind",
        description="Suffix of per-member methods that receive the registered element",
    )
    help_description: str = Field(
        default="Show help information", description="Description of the help option"
    )
    version_description: str = Field(
        default="Show version information", description="Description of the version option"
    )
