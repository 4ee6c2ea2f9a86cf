"""Configuration-related exceptions.

These are raised while a model type is described or its command tree is
built, before any command-line token is parsed:

- ConfigurationError: Base class for configuration errors
- UnsupportedValueTypeError: A member's value shape cannot be bound
- UnsupportedSignatureError: A handler or hook takes the wrong parameters
- DuplicateDeclarationError: One declaration kind used twice on a member
- AmbiguousRemainingArgumentsError: More than one remaining-arguments capture
- MissingModelError: The model instance cannot be created
"""

from typing import Any

from .base import ClibindError


def _describe_type(annotation: Any) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)


class ConfigurationError(ClibindError):
    """Model declarations are invalid and cannot be bound."""
    pass


class UnsupportedValueTypeError(ConfigurationError):
    """The value type of a bound member is not supported for its element."""

    def __init__(self, model_name: str, member: str, annotation: Any, element: str = "option"):
        """
        Initialize unsupported value type error.

        Args:
            model_name: Name of the model class declaring the member
            member: Name of the bound member
            annotation: The offending type annotation
            element: Kind of element being bound (option, argument, ...)
        """
        type_name = _describe_type(annotation)
        super().__init__(
            user_message=f"Unsupported {element} value type for '{model_name}.{member}': {type_name}",
            technical_message=(
                f"{element} member {model_name}.{member} has value type {annotation!r}; "
                "expected str, a sequence of str, bool or bool | None"
            ),
            recovery_hint=(
                f"Annotate '{member}' as str, list[str] or bool, "
                "or declare the arity explicitly"
            ),
        )
        self.model_name = model_name
        self.member = member
        self.annotation = annotation
        self.element = element


class UnsupportedSignatureError(ConfigurationError):
    """A handler or hook method declares an unsupported parameter list."""

    def __init__(self, model_name: str, member: str, parameter_count: int, element: str, expected: str):
        """
        Initialize unsupported signature error.

        Args:
            model_name: Name of the model class declaring the method
            member: Name of the method
            parameter_count: Number of parameters found (excluding self)
            element: Kind of element or hook being bound
            expected: Human-readable description of the accepted signatures
        """
        super().__init__(
            user_message=f"Method signature is not supported for {element} '{model_name}.{member}'",
            technical_message=(
                f"{element} handler {model_name}.{member} takes {parameter_count} "
                f"parameter(s); expected {expected}"
            ),
            recovery_hint=f"Change '{member}' to take {expected}",
        )
        self.model_name = model_name
        self.member = member
        self.parameter_count = parameter_count
        self.element = element


class DuplicateDeclarationError(ConfigurationError):
    """The same declaration kind was applied more than once to one member."""

    def __init__(self, model_name: str, member: str | None, kind: str):
        """
        Initialize duplicate declaration error.

        Args:
            model_name: Name of the model class
            member: Name of the member, or None for class-level declarations
            kind: The repeated declaration kind
        """
        where = f"'{model_name}.{member}'" if member else f"class '{model_name}'"
        super().__init__(
            user_message=f"{kind} is declared more than once on {where}",
            technical_message=f"duplicate {kind} declaration on {where}",
            recovery_hint=f"Remove the extra {kind} declaration",
        )
        self.model_name = model_name
        self.member = member
        self.kind = kind


class AmbiguousRemainingArgumentsError(ConfigurationError):
    """More than one member captures the remaining arguments of one command."""

    def __init__(self, model_name: str, members: list[str]):
        """
        Initialize ambiguous remaining arguments error.

        Args:
            model_name: Name of the model class
            members: All members declaring a remaining-arguments capture
        """
        listed = ", ".join(members)
        super().__init__(
            user_message=f"'{model_name}' captures remaining arguments more than once: {listed}",
            technical_message=f"{len(members)} RemainingArguments declarations on {model_name}: {listed}",
            recovery_hint="Keep a single RemainingArguments declaration per command",
        )
        self.model_name = model_name
        self.members = members


class MissingModelError(ConfigurationError):
    """A binding has no model instance to populate."""

    def __init__(self, model_type: Any, reason: str):
        """
        Initialize missing model error.

        Args:
            model_type: The model type that could not be instantiated (may be None)
            reason: Why no instance is available
        """
        name = _describe_type(model_type) if model_type is not None else "<none>"
        super().__init__(
            user_message=f"Binding has no model instance for '{name}'",
            technical_message=f"cannot instantiate model {model_type!r}: {reason}",
            recovery_hint="Model types must be classes that can be constructed without arguments",
        )
        self.model_type = model_type
        self.reason = reason
