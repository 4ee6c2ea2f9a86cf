"""Binding nodes and their lifecycle."""

import logging
from collections.abc import Callable
from typing import Any, Generic, TextIO, TypeVar

from clibind.engine import ArgumentHandle, CommandHandle, OptionHandle
from clibind.exceptions import BindingStateError
from clibind.models import LifecycleState, ModelDescriptor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")

Action = Callable[[], None]


class BindingNode(Generic[ModelT]):
    """
    One model instance paired with the command it is bound to.

    A node is created for the root model and for every declared sub-command,
    whether or not that sub-command is ever selected. Nodes are single-use:

    ```
    UNBOUND --initialize()--> BUILT --execute()--> EXECUTING --> POST_EXECUTED
    ```

    Attributes:
        model: The live model instance values are applied to
        command: Command handle the model's elements are registered on
        descriptor: Resolved metadata of the model type
        parent: Enclosing node (None for the root)
        children: Nodes of declared sub-commands, in declaration order
        options: Option handles registered for this node
        arguments: Argument handles registered for this node
        apply_actions: Deferred actions that copy parsed values into the model
        post_exec_actions: Deferred actions run after the node is marked executed
        executed: True once this node's command was selected and executed
        exit_code: Exit code produced by the on-exec hook (None until executed)
    """

    def __init__(
        self,
        model: ModelT,
        command: CommandHandle,
        descriptor: ModelDescriptor,
        parent: "BindingNode[Any] | None" = None,
    ):
        self.model = model
        self.command = command
        self.descriptor = descriptor
        self.parent = parent
        self.children: list[BindingNode[Any]] = []
        self.options: list[OptionHandle] = []
        self.arguments: list[ArgumentHandle] = []
        self.apply_actions: list[Action] = []
        self.post_exec_actions: list[Action] = []
        self.executed = False
        self.exit_code: int | None = None
        self.state = LifecycleState.UNBOUND

    @property
    def name(self) -> str:
        return self.command.name

    @property
    def out(self) -> TextIO:
        return self.command.out

    @property
    def error(self) -> TextIO:
        return self.command.error

    def initialize(self) -> None:
        """Enter the BUILT state and run the on-init hook."""
        self._transition(LifecycleState.UNBOUND, LifecycleState.BUILT)

        hook = self.descriptor.on_init
        if hook is not None:
            logger.debug(f"Running {type(self.model).__name__}.{hook.name}")
            method = getattr(self.model, hook.name)
            if hook.takes_command:
                method(self.command)
            else:
                method()

    def execute(self) -> int:
        """
        Apply parsed values and run post-exec actions and the on-exec hook.

        Called by the command's terminal callback, or by a sub-command's
        post-invocation callback for ancestors of the selected command.

        Returns:
            The on-exec hook's integer result, or 0

        Raises:
            BindingStateError: If the node is not in the BUILT state
        """
        self._transition(LifecycleState.BUILT, LifecycleState.EXECUTING)

        for action in self.apply_actions:
            action()
        self.executed = True

        for action in self.post_exec_actions:
            action()

        self.exit_code = self._run_on_exec()
        self.state = LifecycleState.POST_EXECUTED
        logger.debug(f"Node '{self.name}' executed with exit code {self.exit_code}")
        return self.exit_code

    def _run_on_exec(self) -> int:
        hook = self.descriptor.on_exec
        if hook is None:
            return 0

        method = getattr(self.model, hook.name)
        result = method(self.command) if hook.takes_command else method()
        if isinstance(result, int) and not isinstance(result, bool):
            return result
        return 0

    def _transition(self, expected: LifecycleState, target: LifecycleState) -> None:
        if self.state is not expected:
            raise BindingStateError(self.name, self.state.value)
        logger.debug(f"Node '{self.name}': {self.state.value} -> {target.value}")
        self.state = target

    def __repr__(self) -> str:
        return (
            f"BindingNode({type(self.model).__name__}, command={self.name!r}, "
            f"state={self.state.value})"
        )
