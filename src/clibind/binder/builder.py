"""Build a command tree from a model type and run it.

This module turns a ModelDescriptor into registrations on a CommandHandle,
one BindingNode per model instance, recursively for sub-commands.

## Execution order

click fires only the deepest matched command's callback. Every sub-command
handle therefore gets a post-invocation callback that fires its parent's
handle, so a selected branch executes bottom-up:

```
child: apply values -> post-exec actions -> on_exec
parent: apply values -> post-exec actions (child model delivered) -> on_exec
...up to the root
```

The exit code of the deepest command is the exit code of the run.
"""

import logging
from typing import Any, Generic, TextIO

from clibind.engine import CommandHandle
from clibind.exceptions import BindingStateError, ErrorContext, MissingModelError
from clibind.models import (
    ArgumentSpec,
    BinderConfig,
    BindingTarget,
    CommandLineSpec,
    CommandSpec,
    OptionSpec,
    RemainingArgsSpec,
    TargetStyle,
    VersionSpec,
)

from .descriptor import describe
from .marshalling import argument_applier, command_applier, option_applier, remaining_applier
from .node import BindingNode, ModelT

logger = logging.getLogger(__name__)


def instantiate(model_type: type[ModelT]) -> ModelT:
    """Default-construct a model."""
    try:
        return model_type()
    except TypeError as e:
        raise MissingModelError(model_type, str(e)) from e


def bind_model(
    model_type: type[ModelT],
    config: BinderConfig | None = None,
    command: CommandHandle | None = None,
    parent: BindingNode[Any] | None = None,
    command_spec: CommandSpec | None = None,
) -> BindingNode[ModelT]:
    """
    Bind a fresh instance of ``model_type`` to a command handle.

    Args:
        model_type: Model class to instantiate and bind
        config: Binder configuration (defaults to BinderConfig())
        command: Handle to configure; a new root handle is created when None
        parent: Parent node, for sub-commands
        command_spec: The parent's member that declared this sub-command

    Returns:
        The BindingNode in BUILT state, with every element registered

    Raises:
        ConfigurationError: If the model's declarations cannot be bound
    """
    config = config or BinderConfig()
    descriptor = describe(model_type, config)
    model = instantiate(model_type)

    if command is None:
        command = CommandHandle()
    _configure_command(command, descriptor.command_line, command_spec)

    node: BindingNode[ModelT] = BindingNode(model, command, descriptor, parent)
    node.initialize()

    if descriptor.help is not None:
        command.set_help(descriptor.help.template, config.help_description)
    if descriptor.version is not None:
        _register_version(node, descriptor.version, config)

    for member in descriptor.members:
        match member:
            case OptionSpec():
                _register_option(node, member)
            case ArgumentSpec():
                _register_argument(node, member)
            case CommandSpec():
                _register_command(node, member, config)
            case RemainingArgsSpec():
                _register_remaining(node, member)

    command.on_execute(node.execute)
    logger.debug(f"Bound {model_type.__name__} to command '{command.name}'")
    return node


def _configure_command(
    command: CommandHandle, spec: CommandLineSpec, command_spec: CommandSpec | None
) -> None:
    # The declaring member's name wins over the child class's own name
    command.name = command_spec.name if command_spec is not None else spec.name
    command.full_name = spec.full_name
    command.description = spec.description
    command.allow_argument_separator = spec.allow_argument_separator
    command.throw_on_unexpected_arg = spec.throw_on_unexpected_arg
    if command_spec is not None and command_spec.throw_on_unexpected_arg is not None:
        command.throw_on_unexpected_arg = command_spec.throw_on_unexpected_arg


def _run_on_bind(node: BindingNode[Any], target: BindingTarget, element: Any) -> None:
    if target.on_bind is not None:
        getattr(node.model, target.on_bind)(element)


def _register_option(node: BindingNode[Any], spec: OptionSpec) -> None:
    option = node.command.add_option(spec.template, spec.description, spec.arity, spec.inherited)
    node.options.append(option)
    node.apply_actions.append(option_applier(node, spec, option))
    _run_on_bind(node, spec.target, option)
    logger.debug(f"Registered option {spec.template!r} ({spec.arity.value}) -> {spec.target.name}")


def _register_argument(node: BindingNode[Any], spec: ArgumentSpec) -> None:
    argument = node.command.add_argument(spec.name, spec.description, spec.multiple)
    node.arguments.append(argument)
    node.apply_actions.append(argument_applier(node, spec, argument))
    _run_on_bind(node, spec.target, argument)
    logger.debug(f"Registered argument {spec.name!r} -> {spec.target.name}")


def _register_remaining(node: BindingNode[Any], spec: RemainingArgsSpec) -> None:
    node.command.allow_remaining_arguments = True
    node.apply_actions.append(remaining_applier(node, spec))
    _run_on_bind(node, spec.target, node.command)
    logger.debug(f"Registered remaining arguments -> {spec.target.name}")


def _register_command(node: BindingNode[Any], spec: CommandSpec, config: BinderConfig) -> None:
    child_command = node.command.add_command(spec.name)
    child = bind_model(spec.model_type, config, child_command, node, spec)
    node.children.append(child)

    # click stops at the deepest command; hand control back to this node afterwards
    child_command.after_execute(node.command.fire)
    node.post_exec_actions.append(command_applier(node, spec, child))
    _run_on_bind(node, spec.target, child_command)
    logger.debug(f"Registered command {spec.name!r} -> {spec.model_type.__name__}")


def _register_version(node: BindingNode[Any], spec: VersionSpec, config: BinderConfig) -> None:
    if not spec.is_renderable:
        logger.debug(f"Version option {spec.template!r} has no version source, not registered")
        return

    short = _getter(node, spec.short_getter) if spec.short_getter else spec.short_version
    long = _getter(node, spec.long_getter) if spec.long_getter else spec.long_version
    node.command.set_version(spec.template, short, long, config.version_description)


def _getter(node: BindingNode[Any], target: BindingTarget):
    if target.style is TargetStyle.METHOD:
        return getattr(node.model, target.name)
    return lambda: getattr(node.model, target.name)


class CommandLineBinding(Generic[ModelT]):
    """
    A model bound to a command line, ready to run once.

    Example:
        ```python
        binding = CommandLineBinding.build(GreetingModel)
        exit_code = binding.execute("--greeting", "Hi", "name", "Ada")
        print(binding.model.greeting)
        ```
    """

    def __init__(self, root: BindingNode[ModelT]):
        self._root = root
        self._executed = False

    @classmethod
    def build(cls, model_type: type[ModelT], config: BinderConfig | None = None) -> "CommandLineBinding[ModelT]":
        """
        Build the command tree for ``model_type``.

        Raises:
            ConfigurationError: If the model's declarations cannot be bound
        """
        if model_type is None:
            raise MissingModelError(None, "no model type given")
        with ErrorContext(f"bind {getattr(model_type, '__name__', model_type)}", logger):
            return cls(bind_model(model_type, config))

    @property
    def root(self) -> BindingNode[ModelT]:
        return self._root

    @property
    def model(self) -> ModelT:
        return self._root.model

    @property
    def command(self) -> CommandHandle:
        return self._root.command

    @property
    def out(self) -> TextIO:
        return self.command.out

    @out.setter
    def out(self, stream: TextIO | None) -> None:
        self.command.out = stream

    @property
    def error(self) -> TextIO:
        return self.command.error

    @error.setter
    def error(self, stream: TextIO | None) -> None:
        self.command.error = stream

    def execute(self, *args: str) -> int:
        """
        Parse ``args`` into the model and run its lifecycle.

        Returns:
            Exit code of the selected command, or click's exit code for
            rejected command lines

        Raises:
            BindingStateError: If this binding was already executed
        """
        if self._executed:
            raise BindingStateError(self.command.name, self._root.state.value)
        self._executed = True
        return self.command.execute(*args)

    def get_help(self) -> str:
        return self.command.get_help()

    def full_name_and_version(self) -> str:
        return self.command.full_name_and_version()
