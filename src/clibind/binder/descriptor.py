"""Describe a model type: declarations in, resolved specs out.

describe() walks a model class once and produces a ModelDescriptor. Every
default is filled in, every arity is inferred, every handler signature is
checked and lifecycle hooks are resolved by name, so configuration errors
surface here, before any command is registered.
"""

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Annotated, Any

from clibind.exceptions import (
    AmbiguousRemainingArgumentsError,
    DuplicateDeclarationError,
    MissingModelError,
    UnsupportedSignatureError,
    UnsupportedValueTypeError,
)
from clibind.models import (
    Argument,
    ArgumentSpec,
    BinderConfig,
    BindingTarget,
    Command,
    CommandLine,
    CommandLineSpec,
    CommandSpec,
    HelpOption,
    HelpSpec,
    HookSpec,
    MemberKind,
    ModelDescriptor,
    Option,
    OptionSpec,
    RemainingArguments,
    RemainingArgsSpec,
    TargetStyle,
    VersionOption,
    VersionSpec,
)
from clibind.models.declarations import (
    MemberDeclaration,
    class_declarations,
    member_declarations,
)
from clibind.models.enums import Arity

from .inference import (
    check_parameter_count,
    handler_hints,
    handler_parameters,
    infer_arity,
    is_context_parameter,
    is_handler,
    is_string_type,
    model_class,
    unwrap_annotated,
)

logger = logging.getLogger(__name__)


class EmptyCommand:
    """Model of a sub-command that binds no values of its own."""


@dataclass
class DeclaredMember:
    """A model member carrying at least one declaration."""

    name: str
    style: TargetStyle
    declarations: tuple[MemberDeclaration, ...]
    owner: type
    annotation: Any = None  # Attributes only
    raw: Any = None  # Class-body object for properties and methods


def default_option_template(name: str) -> str:
    return "--" + name.lower().replace("_", "-")


def default_command_name(name: str) -> str:
    return name.lower().replace("_", "-")


def default_argument_name(name: str) -> str:
    return name.lower()


def describe(model_type: type, config: BinderConfig | None = None) -> ModelDescriptor:
    """
    Resolve every declaration on ``model_type``.

    Args:
        model_type: Model class to describe
        config: Hook names and option descriptions (defaults to BinderConfig())

    Returns:
        ModelDescriptor with members in declaration order

    Raises:
        ConfigurationError: If any declaration cannot be bound
    """
    if not isinstance(model_type, type):
        raise MissingModelError(model_type, "model type must be a class")

    config = config or BinderConfig()
    model_name = model_type.__name__

    class_decls = _by_kind(model_name, None, class_declarations(model_type))
    members = discover_members(model_type)

    specs = []
    for member in members:
        for declaration in member.declarations:
            match declaration:
                case Option():
                    specs.append(_option_spec(model_name, member, declaration, config))
                case Argument():
                    specs.append(_argument_spec(model_name, member, declaration, config))
                case Command():
                    specs.append(_command_spec(model_name, member, declaration, config))
                case RemainingArguments():
                    specs.append(_remaining_spec(model_name, member, declaration, config))

    captures = [spec.target.name for spec in specs if isinstance(spec, RemainingArgsSpec)]
    if len(captures) > 1:
        raise AmbiguousRemainingArgumentsError(model_name, captures)

    descriptor = ModelDescriptor(
        model_type=model_type,
        command_line=_command_line_spec(class_decls.get(MemberKind.COMMAND_LINE)),
        help=_help_spec(class_decls.get(MemberKind.HELP)),
        version=_version_spec(model_name, class_decls.get(MemberKind.VERSION), members),
        members=specs,
        on_init=_hook_spec(model_type, config.on_init_hook, "on-init hook"),
        on_exec=_hook_spec(model_type, config.on_exec_hook, "on-exec hook"),
    )
    logger.debug(f"Described {model_name}: {len(specs)} member(s)")
    return descriptor


def discover_members(model_type: type) -> list[DeclaredMember]:
    """
    Find declared members of ``model_type`` and its bases.

    Annotated attributes come first in annotation order, then methods and
    properties in definition order. Base class members precede derived ones;
    a redefinition in a subclass replaces the base member in place.
    """
    model_name = model_type.__name__
    hierarchy = [klass for klass in reversed(model_type.__mro__) if klass is not object]

    attributes: dict[str, DeclaredMember] = {}
    for klass in hierarchy:
        for name, hint in _class_annotations(klass).items():
            declarations = ()
            if typing.get_origin(hint) is Annotated:
                declarations = tuple(m for m in hint.__metadata__ if isinstance(m, MemberDeclaration))
            if not declarations:
                attributes.pop(name, None)
                continue
            _by_kind(model_name, name, declarations)
            attributes[name] = DeclaredMember(
                name,
                TargetStyle.ATTRIBUTE,
                declarations,
                model_type,
                annotation=unwrap_annotated(hint),
            )

    callables: dict[str, DeclaredMember] = {}
    for klass in hierarchy:
        for name, raw in vars(klass).items():
            if not (is_handler(raw) or isinstance(raw, property)):
                continue
            declarations = member_declarations(raw)
            if not declarations:
                callables.pop(name, None)
                continue
            _by_kind(model_name, name, declarations)
            style = TargetStyle.PROPERTY if isinstance(raw, property) else TargetStyle.METHOD
            callables[name] = DeclaredMember(name, style, declarations, model_type, raw=raw)

    return [*attributes.values(), *callables.values()]


def _class_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except (NameError, TypeError) as e:
        # Names imported only for type checking; such annotations carry no declarations
        logger.debug(f"Unresolved annotations on {klass.__qualname__}: {e}")
        return inspect.get_annotations(klass)


def _by_kind(model_name: str, member: str | None, declarations: tuple[Any, ...]) -> dict[MemberKind, Any]:
    found: dict[MemberKind, Any] = {}
    for declaration in declarations:
        if declaration.kind in found:
            raise DuplicateDeclarationError(model_name, member, type(declaration).__name__)
        found[declaration.kind] = declaration
    return found


# -- Value members ------------------------------------------------------------


def _property_type(model_name: str, member: DeclaredMember, element: str) -> Any:
    prop: property = member.raw
    if prop.fset is None:
        raise UnsupportedSignatureError(model_name, member.name, 0, element, "a property with a setter")
    setter = list(inspect.signature(prop.fset).parameters.values())[1:]
    setter_hints = typing.get_type_hints(prop.fset, include_extras=True)
    if setter and setter[0].name in setter_hints:
        return unwrap_annotated(setter_hints[setter[0].name])
    return unwrap_annotated(typing.get_type_hints(prop.fget, include_extras=True).get("return", Any))


def _value_target(
    model_name: str,
    member: DeclaredMember,
    element: str,
    config: BinderConfig,
    minimum: int,
) -> BindingTarget:
    """Classify the member a value is delivered to (at most value + context parameters)."""
    on_bind = _on_bind_hook(model_name, member, config)

    if member.style is TargetStyle.ATTRIBUTE:
        return BindingTarget(
            name=member.name, style=member.style, value_type=member.annotation, on_bind=on_bind
        )
    if member.style is TargetStyle.PROPERTY:
        return BindingTarget(
            name=member.name,
            style=member.style,
            value_type=_property_type(model_name, member, element),
            on_bind=on_bind,
        )

    parameters = handler_parameters(member.raw)
    check_parameter_count(model_name, member.name, parameters, element, minimum, 2)
    if not parameters:
        return BindingTarget(
            name=member.name, style=member.style, takes_value=False, on_bind=on_bind
        )

    hints = handler_hints(member.raw)
    first = parameters[0]
    spreads = first.kind is inspect.Parameter.VAR_POSITIONAL
    if len(parameters) == 2 and not is_context_parameter(parameters[1], hints):
        raise UnsupportedSignatureError(
            model_name,
            member.name,
            2,
            element,
            "a value parameter optionally followed by a BindingNode parameter",
        )
    return BindingTarget(
        name=member.name,
        style=member.style,
        value_type=unwrap_annotated(hints.get(first.name, Any)),
        takes_context=len(parameters) == 2,
        spreads_values=spreads,
        on_bind=on_bind,
    )


def _option_spec(
    model_name: str, member: DeclaredMember, declaration: Option, config: BinderConfig
) -> OptionSpec:
    target = _value_target(model_name, member, "option", config, minimum=0)

    arity = declaration.arity
    if arity is None:
        if not target.takes_value:
            arity = Arity.FLAG
        elif target.spreads_values:
            arity = Arity.MULTIPLE
        else:
            arity = infer_arity(target.value_type)
            if arity is None:
                raise UnsupportedValueTypeError(model_name, member.name, target.value_type)

    return OptionSpec(
        template=declaration.template or default_option_template(member.name),
        description=declaration.description or "",
        arity=arity,
        inherited=declaration.inherited,
        target=target,
    )


def _argument_spec(
    model_name: str, member: DeclaredMember, declaration: Argument, config: BinderConfig
) -> ArgumentSpec:
    target = _value_target(model_name, member, "argument", config, minimum=1)

    multiple = declaration.multiple
    if multiple is None:
        if target.spreads_values:
            multiple = True
        else:
            arity = infer_arity(target.value_type)
            if arity is None or arity is Arity.FLAG:
                raise UnsupportedValueTypeError(
                    model_name, member.name, target.value_type, element="argument"
                )
            multiple = arity is Arity.MULTIPLE

    return ArgumentSpec(
        name=declaration.name or default_argument_name(member.name),
        description=declaration.description or "",
        multiple=multiple,
        target=target,
    )


def _remaining_spec(
    model_name: str, member: DeclaredMember, declaration: RemainingArguments, config: BinderConfig
) -> RemainingArgsSpec:
    target = _value_target(model_name, member, "remaining arguments", config, minimum=1)
    return RemainingArgsSpec(skip_if_empty=declaration.skip_if_empty, target=target)


def _command_spec(
    model_name: str, member: DeclaredMember, declaration: Command, config: BinderConfig
) -> CommandSpec:
    on_bind = _on_bind_hook(model_name, member, config)

    if member.style is TargetStyle.METHOD:
        parameters = handler_parameters(member.raw)
        check_parameter_count(model_name, member.name, parameters, "command", 0, 1)
        if parameters:
            annotation = handler_hints(member.raw).get(parameters[0].name)
            child_type = declaration.model or model_class(annotation)
        else:
            child_type = declaration.model or EmptyCommand
        target = BindingTarget(
            name=member.name,
            style=member.style,
            value_type=child_type,
            takes_value=bool(parameters),
            on_bind=on_bind,
        )
    else:
        annotation = (
            member.annotation
            if member.style is TargetStyle.ATTRIBUTE
            else _property_type(model_name, member, "command")
        )
        child_type = declaration.model or model_class(annotation)
        target = BindingTarget(
            name=member.name, style=member.style, value_type=child_type, on_bind=on_bind
        )

    if child_type is None:
        raise MissingModelError(
            None, f"sub-command '{model_name}.{member.name}' does not name a model class"
        )

    return CommandSpec(
        name=declaration.name or default_command_name(member.name),
        throw_on_unexpected_arg=declaration.throw_on_unexpected_arg,
        model_type=child_type,
        target=target,
    )


# -- Class-level declarations ---------------------------------------------------


def _command_line_spec(declaration: CommandLine | None) -> CommandLineSpec:
    if declaration is None:
        return CommandLineSpec()
    return CommandLineSpec(
        name=declaration.name or "",
        full_name=declaration.full_name or "",
        description=declaration.description or "",
        allow_argument_separator=declaration.allow_argument_separator,
        throw_on_unexpected_arg=declaration.throw_on_unexpected_arg,
    )


def _help_spec(declaration: HelpOption | None) -> HelpSpec | None:
    return HelpSpec(template=declaration.template) if declaration is not None else None


def _version_spec(
    model_name: str, declaration: VersionOption | None, members: list[DeclaredMember]
) -> VersionSpec | None:
    if declaration is None:
        return None

    getters: dict[MemberKind, BindingTarget] = {}
    for member in members:
        for kind in (MemberKind.SHORT_VERSION_GETTER, MemberKind.LONG_VERSION_GETTER):
            if any(d.kind is kind for d in member.declarations):
                getters[kind] = _getter_target(model_name, member)

    return VersionSpec(
        template=declaration.template,
        short_version=declaration.short_version,
        long_version=declaration.long_version,
        short_getter=getters.get(MemberKind.SHORT_VERSION_GETTER),
        long_getter=getters.get(MemberKind.LONG_VERSION_GETTER),
    )


def _getter_target(model_name: str, member: DeclaredMember) -> BindingTarget:
    """A zero-parameter method, or a str-typed attribute or property."""
    if member.style is TargetStyle.METHOD:
        parameters = handler_parameters(member.raw)
        check_parameter_count(model_name, member.name, parameters, "version getter", 0, 0)
        annotation = handler_hints(member.raw).get("return", Any)
        if not is_string_type(annotation):
            raise UnsupportedValueTypeError(model_name, member.name, annotation, element="version getter")
        return BindingTarget(name=member.name, style=member.style, value_type=str, takes_value=False)

    if member.style is TargetStyle.ATTRIBUTE:
        annotation = member.annotation
    else:
        annotation = typing.get_type_hints(member.raw.fget).get("return", Any)
    if not is_string_type(annotation):
        raise UnsupportedValueTypeError(model_name, member.name, annotation, element="version getter")
    return BindingTarget(name=member.name, style=member.style, value_type=annotation)


# -- Hooks ----------------------------------------------------------------------


def _hook_spec(model_type: type, name: str, element: str) -> HookSpec | None:
    raw = inspect.getattr_static(model_type, name, None)
    if raw is None or not is_handler(raw):
        return None
    parameters = handler_parameters(raw)
    check_parameter_count(model_type.__name__, name, parameters, element, 0, 1)
    return HookSpec(name=name, takes_command=bool(parameters))


def _on_bind_hook(model_name: str, member: DeclaredMember, config: BinderConfig) -> str | None:
    name = member.name + config.on_bind_suffix
    hook = inspect.getattr_static(member.owner, name, None)
    if hook is None or not is_handler(hook):
        return None
    check_parameter_count(model_name, name, handler_parameters(hook), "on-bind hook", 1, 1)
    return name
