"""Tests for sub-command binding and parent/child execution order."""

from typing import Annotated

import pytest

from clibind import (
    Argument,
    Command,
    CommandLine,
    CommandLineBinding,
    EmptyCommand,
    HelpOption,
    Option,
    RemainingArguments,
)
from clibind.models import LifecycleState

events: list[str] = []


@pytest.fixture(autouse=True)
def clear_events():
    events.clear()
    yield
    events.clear()


class NameModel:
    def __init__(self):
        self._names = None

    @Argument("names", multiple=True)
    @property
    def names(self) -> list[str] | None:
        return self._names

    @names.setter
    def names(self, value: list[str]) -> None:
        events.append("child-apply")
        self._names = value

    def on_exec(self) -> int:
        events.append("child-exec")
        return 5


@CommandLine("greeting")
@HelpOption("-h|--help")
class GreetingModel:
    greeting: Annotated[str, Option("-g|--greeting <greeting>")] = "Hello"
    uppercase: Annotated[bool, Option("-u|--uppercase", inherited=True)] = False

    def __init__(self):
        self.names = None
        self.handler_owner = None

    @Command("name")
    def name(self, model: NameModel) -> None:
        events.append("parent-post-exec")
        self.handler_owner = self
        self.names = model.names

    def on_exec(self) -> int:
        events.append("parent-exec")
        return 9


@CommandLine("greeting", throw_on_unexpected_arg=False)
class TolerantGreetingModel:
    greeting: Annotated[str, Option("-g|--greeting <greeting>")] = "Hello"
    uppercase: Annotated[bool, Option("-u|--uppercase", inherited=True)] = False
    rest: Annotated[list[str] | None, RemainingArguments()] = None

    def __init__(self):
        self.names = None
        self.ran = False

    @Command("name")
    def name(self, model: NameModel) -> None:
        self.names = model.names

    def on_exec(self) -> int:
        self.ran = True
        return 0


@CommandLine("renamed", description="Child with its own name")
class Sub1Model:
    value: Annotated[str | None, Option("--value <value>")] = None


class Sub2Model:
    flag: Annotated[bool, Option("--flag")] = False


class TolerantModel:
    rest: Annotated[list[str] | None, RemainingArguments()] = None


class RootModel:
    sub1: Annotated[Sub1Model | None, Command()] = None
    second_cmd: Annotated[Sub2Model | None, Command()] = None
    tolerant: Annotated[TolerantModel | None, Command(throw_on_unexpected_arg=False)] = None

    def __init__(self):
        self.triggered = False

    @Command("sub3")
    def sub3(self) -> None:
        self.triggered = True


@pytest.mark.integration
class TestGreeting:
    """Test the greeting sample: parent options with a selected sub-command."""

    def test_child_then_parent_order(self, bind):
        """Test the child applies and executes before the parent's post-exec."""
        binding = bind(GreetingModel)

        binding.execute("--uppercase", "name", "John", "Jacob", "Jingle")

        assert events == ["child-apply", "child-exec", "parent-post-exec", "parent-exec"]
        assert binding.model.uppercase is True
        assert binding.model.names == ["John", "Jacob", "Jingle"]

    def test_inherited_option_after_sub_command(self, bind):
        """Test inherited options may follow the sub-command."""
        binding = bind(GreetingModel)

        binding.execute("-g", "Howdy", "name", "Ada", "--uppercase")

        assert binding.model.greeting == "Howdy"
        assert binding.model.uppercase is True

    def test_deepest_exit_code(self, bind):
        """Test the selected command's exit code is returned."""
        binding = bind(GreetingModel)

        exit_code = binding.execute("name", "Ada")

        child = binding.root.children[0]
        assert exit_code == 5
        assert child.exit_code == 5
        assert binding.root.exit_code == 9

    def test_handler_runs_on_parent_model(self, bind):
        """Test command handlers are invoked on the parent's model."""
        binding = bind(GreetingModel)

        binding.execute("name", "Ada")

        assert binding.model.handler_owner is binding.model

    def test_no_sub_command(self, bind):
        """Test the parent runs alone when no sub-command is given."""
        binding = bind(GreetingModel)

        exit_code = binding.execute("-g", "Hi")

        assert exit_code == 9
        assert events == ["parent-exec"]
        assert binding.model.names is None


@pytest.mark.integration
class TestSubCommands:
    """Test sub-command members."""

    def test_attribute_receives_child_model(self, bind):
        """Test a settable member receives the executed child's model."""
        binding = bind(RootModel)

        binding.execute("sub1", "--value", "x")

        assert isinstance(binding.model.sub1, Sub1Model)
        assert binding.model.sub1.value == "x"
        assert binding.model.second_cmd is None
        assert binding.model.triggered is False

    def test_unselected_commands_untouched(self, bind):
        """Test no sub-command member changes when none is selected."""
        binding = bind(RootModel)

        binding.execute()

        assert binding.model.sub1 is None
        assert binding.model.second_cmd is None
        assert binding.model.tolerant is None
        assert binding.model.triggered is False

    def test_zero_parameter_handler(self, bind):
        """Test bare-trigger command handlers."""
        binding = bind(RootModel)

        binding.execute("sub3")

        assert binding.model.triggered is True
        assert isinstance(binding.root.children[-1].model, EmptyCommand)

    def test_member_name_wins(self):
        """Test the declaring member names the command."""
        binding = CommandLineBinding.build(RootModel)

        names = [child.name for child in binding.command.commands]

        assert names == ["sub1", "second-cmd", "tolerant", "sub3"]
        assert binding.command.commands[0].description == "Child with its own name"

    def test_children_built_eagerly(self):
        """Test every sub-command gets a node before parsing."""
        binding = CommandLineBinding.build(RootModel)

        children = binding.root.children

        assert len(children) == 4
        assert all(child.parent is binding.root for child in children)
        assert all(child.state is LifecycleState.BUILT for child in children)

    def test_only_selected_child_executes(self, bind):
        """Test unselected children stay in the BUILT state."""
        binding = bind(RootModel)

        binding.execute("second-cmd", "--flag")

        sub1, second, *_ = binding.root.children
        assert second.executed
        assert second.state is LifecycleState.POST_EXECUTED
        assert not sub1.executed
        assert sub1.state is LifecycleState.BUILT
        assert binding.model.second_cmd.flag is True

    def test_unexpected_tokens_tolerated(self, bind):
        """Test a command override tolerating unknown tokens."""
        binding = bind(RootModel)

        binding.execute("tolerant", "--what", "ever")

        assert binding.model.tolerant.rest == ["--what", "ever"]

    def test_unknown_command(self, bind, err):
        """Test unknown sub-commands are reported by click."""
        binding = bind(RootModel)

        assert binding.execute("sub4") == 2
        assert "No such command" in err.getvalue()


@pytest.mark.integration
class TestTolerantParent:
    """Test a parent command that tolerates unexpected tokens and has sub-commands."""

    def test_unknown_option_captured(self, bind, err):
        """Test an unknown option runs the parent and lands in its remaining arguments."""
        binding = bind(TolerantGreetingModel)

        exit_code = binding.execute("--foo")

        assert exit_code == 0
        assert binding.model.ran is True
        assert binding.model.rest == ["--foo"]
        assert binding.model.names is None
        assert err.getvalue() == ""

    def test_unknown_positionals_captured(self, bind):
        """Test positionals naming no sub-command stay with the parent."""
        binding = bind(TolerantGreetingModel)

        exit_code = binding.execute("-g", "hi", "foo", "bar")

        assert exit_code == 0
        assert binding.model.greeting == "hi"
        assert binding.model.rest == ["foo", "bar"]
        assert not binding.root.children[0].executed

    def test_sub_command_still_selected(self, bind):
        """Test the sub-command runs and hands its model back to the parent."""
        binding = bind(TolerantGreetingModel)

        exit_code = binding.execute(
            "-g", "Howdy!", "--uppercase", "name", "John", "Jacob", "Jingle"
        )

        assert exit_code == 5
        assert events == ["child-apply", "child-exec"]
        assert binding.model.greeting == "Howdy!"
        assert binding.model.uppercase is True
        assert binding.model.names == ["John", "Jacob", "Jingle"]
        assert binding.model.rest == []
        assert binding.model.ran is True
