"""Deferred actions that copy parsed values into a model.

Each factory returns a zero-argument callable queued on a BindingNode while
the command tree is built. The callables read the values click recorded on
the engine handles and deliver them to the bound member.
"""

from collections.abc import Sequence
from typing import Any

from clibind.engine import ArgumentHandle, OptionHandle
from clibind.models import (
    Arity,
    ArgumentSpec,
    BindingTarget,
    CommandSpec,
    OptionSpec,
    RemainingArgsSpec,
    TargetStyle,
)

from .inference import sequence_factory
from .node import Action, BindingNode


def deliver(node: BindingNode[Any], target: BindingTarget, value: Any) -> None:
    """
    Deliver ``value`` to the member described by ``target``.

    Attributes and properties are assigned. Handlers are called with the
    value (spread when they declare ``*values``), followed by ``node`` when
    they take a context parameter.
    """
    if target.style is not TargetStyle.METHOD:
        setattr(node.model, target.name, value)
        return

    handler = getattr(node.model, target.name)
    if not target.takes_value:
        handler()
        return

    args = list(value) if target.spreads_values else [value]
    if target.takes_context:
        args.append(node)
    handler(*args)


def as_sequence(target: BindingTarget, values: Sequence[str]) -> Sequence[str]:
    """Package multiple values as the container the target's annotation asks for."""
    return sequence_factory(target.value_type)(values)


def option_applier(node: BindingNode[Any], spec: OptionSpec, option: OptionHandle) -> Action:
    """Apply an option if it appeared on the command line; absence leaves the member untouched."""

    def apply() -> None:
        if not option.has_value():
            return
        if spec.arity is Arity.FLAG:
            deliver(node, spec.target, True)
        elif spec.arity is Arity.MULTIPLE:
            deliver(node, spec.target, as_sequence(spec.target, option.values))
        else:
            deliver(node, spec.target, option.value())

    return apply


def argument_applier(node: BindingNode[Any], spec: ArgumentSpec, argument: ArgumentHandle) -> Action:
    def apply() -> None:
        if not argument.values:
            return
        if spec.multiple:
            deliver(node, spec.target, as_sequence(spec.target, argument.values))
        else:
            deliver(node, spec.target, argument.value)

    return apply


def remaining_applier(node: BindingNode[Any], spec: RemainingArgsSpec) -> Action:
    """Apply unconsumed tokens; an empty capture is applied unless skip_if_empty is set."""

    def apply() -> None:
        remaining = node.command.remaining_arguments
        if spec.skip_if_empty and not remaining:
            return
        deliver(node, spec.target, as_sequence(spec.target, remaining))

    return apply


def command_applier(node: BindingNode[Any], spec: CommandSpec, child: BindingNode[Any]) -> Action:
    """
    Deliver a child model to the parent model once the child has executed.

    Handlers are always invoked on the parent's model. Sub-commands that
    were not selected leave the member untouched.
    """

    def apply() -> None:
        if not child.executed:
            return
        deliver(node, spec.target, child.model)

    return apply
