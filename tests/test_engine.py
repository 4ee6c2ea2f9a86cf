"""Tests for the click command handles."""

import io

import pytest

from clibind.engine import CommandHandle
from clibind.models import Arity


@pytest.fixture
def app():
    """Create a root command with captured streams."""
    handle = CommandHandle("app")
    handle.out = io.StringIO()
    handle.error = io.StringIO()
    return handle


@pytest.mark.unit
class TestOptionRecognition:
    """Test values recorded on option handles."""

    def test_single_value(self, app):
        """Test a single-value option."""
        name = app.add_option("-n|--name <name>")

        assert app.execute("--name", "Ada") == 0
        assert name.has_value()
        assert name.value() == "Ada"
        assert name.values == ["Ada"]

    def test_multiple_values_keep_order(self, app):
        """Test repeated options keep command-line order."""
        tags = app.add_option("-t|--tag <tag>", arity=Arity.MULTIPLE)

        app.execute("-t", "b", "--tag", "a", "-t", "c")

        assert tags.values == ["b", "a", "c"]

    def test_flag(self, app):
        """Test a flag is present only when given."""
        loud = app.add_option("-l|--loud", arity=Arity.FLAG)
        quiet = app.add_option("-q|--quiet", arity=Arity.FLAG)

        app.execute("-l")

        assert loud.has_value()
        assert not quiet.has_value()
        assert loud.value() is None

    def test_absent_option(self, app):
        """Test options not given have no value."""
        name = app.add_option("--name <name>")

        app.execute()

        assert not name.has_value()
        assert name.value() is None
        assert name.values == []

    def test_state_reset_between_runs(self, app):
        """Test each run starts from a clean slate."""
        name = app.add_option("--name <name>")

        app.execute("--name", "first")
        app.execute()

        assert not name.has_value()

    def test_configure_callback(self, app):
        """Test the configure callback receives the new handle."""
        seen = []
        option = app.add_option("--name", configure=seen.append)

        assert seen == [option]


@pytest.mark.unit
class TestArguments:
    """Test positional arguments."""

    def test_arguments_consumed_in_order(self, app):
        """Test arguments take tokens in registration order."""
        source = app.add_argument("source")
        targets = app.add_argument("targets", multiple=True)

        app.execute("a.txt", "b.txt", "c.txt")

        assert source.value == "a.txt"
        assert targets.values == ["b.txt", "c.txt"]

    def test_missing_argument(self, app):
        """Test arguments are optional."""
        source = app.add_argument("source")

        assert app.execute() == 0
        assert source.value is None


@pytest.mark.unit
class TestExecution:
    """Test callbacks, exit codes and errors."""

    def test_exit_code_from_callback(self, app):
        """Test an int returned by the callback becomes the exit code."""
        app.on_execute(lambda: 7)

        assert app.execute() == 7

    def test_non_int_result_is_zero(self, app):
        """Test other return values mean success."""
        app.on_execute(lambda: "done")

        assert app.execute() == 0

    def test_after_execute_runs_after_callback(self, app):
        """Test post-invocation callbacks follow the terminal callback."""
        calls = []
        app.on_execute(lambda: calls.append("exec"))
        app.after_execute(lambda: calls.append("after"))

        app.execute()

        assert calls == ["exec", "after"]

    def test_unknown_option_rejected(self, app):
        """Test unknown options are reported on the error stream."""
        assert app.execute("--bogus") == 2
        assert "No such option" in app.error.getvalue()

    def test_unexpected_argument_rejected(self, app):
        """Test extra tokens are rejected by default."""
        assert app.execute("extra") == 2
        assert "unexpected extra argument" in app.error.getvalue()

    def test_unexpected_tokens_tolerated(self, app):
        """Test tolerant commands keep unknown tokens as remaining arguments."""
        app.throw_on_unexpected_arg = False

        assert app.execute("--bogus", "x") == 0
        assert app.remaining_arguments == ["--bogus", "x"]

    def test_remaining_arguments_allowed(self, app):
        """Test extra positional tokens are kept when remaining arguments are allowed."""
        app.allow_remaining_arguments = True

        app.execute("foo", "bar")

        assert app.remaining_arguments == ["foo", "bar"]

    def test_argument_separator(self, app):
        """Test tokens after -- are not parsed as options."""
        app.allow_argument_separator = True
        name = app.add_option("--name <name>")

        app.execute("--", "--name", "x")

        assert not name.has_value()
        assert app.remaining_arguments == ["--name", "x"]

    def test_callback_errors_propagate(self, app):
        """Test exceptions from callbacks reach the caller."""

        def fail():
            raise RuntimeError("boom")

        app.on_execute(fail)

        with pytest.raises(RuntimeError, match="boom"):
            app.execute()


@pytest.mark.unit
class TestSubCommands:
    """Test nested commands."""

    def test_only_deepest_callback_fires(self, app):
        """Test ancestors of the selected command do not run their callback."""
        calls = []
        app.on_execute(lambda: calls.append("app"))
        child = app.add_command("child")
        child.on_execute(lambda: calls.append("child") or 3)

        assert app.execute("child") == 3
        assert calls == ["child"]

    def test_root_fires_without_sub_command(self, app):
        """Test the root callback runs when no sub-command is given."""
        calls = []
        app.on_execute(lambda: calls.append("app"))
        app.add_command("child").on_execute(lambda: calls.append("child"))

        app.execute()

        assert calls == ["app"]

    def test_parent_options_recorded(self, app):
        """Test parent options are recorded when a sub-command runs."""
        verbose = app.add_option("-v", arity=Arity.FLAG)
        child = app.add_command("child")
        name = child.add_option("--name <name>")

        app.execute("-v", "child", "--name", "x")

        assert verbose.has_value()
        assert name.value() == "x"

    def test_inherited_option(self, app):
        """Test inherited options are accepted by descendants."""
        verbose = app.add_option("-v|--verbose", arity=Arity.FLAG, inherited=True)
        grandchild = app.add_command("child").add_command("grandchild")
        grandchild.on_execute(lambda: 0)

        assert app.execute("child", "grandchild", "--verbose") == 0
        assert verbose.has_value()

    def test_non_inherited_option_rejected_on_child(self, app):
        """Test plain options stay on their own command."""
        app.add_option("-v", arity=Arity.FLAG)
        app.add_command("child")

        assert app.execute("child", "-v") == 2

    def test_unknown_command(self, app):
        """Test unknown sub-commands are reported."""
        app.add_command("child")

        assert app.execute("other") == 2
        assert "No such command" in app.error.getvalue()

    def test_tolerant_parent_keeps_unknown_option(self, app):
        """Test a tolerant parent runs itself with an unknown option left over."""
        calls = []
        app.throw_on_unexpected_arg = False
        app.on_execute(lambda: calls.append("app") or 4)
        app.add_command("child").on_execute(lambda: calls.append("child"))

        assert app.execute("--foo") == 4
        assert calls == ["app"]
        assert app.remaining_arguments == ["--foo"]

    def test_tolerant_parent_keeps_unknown_tokens(self, app):
        """Test leftover tokens that name no sub-command stay with the parent."""
        app.throw_on_unexpected_arg = False
        greeting = app.add_option("-g <greeting>")
        app.add_command("child")

        assert app.execute("-g", "hi", "foo", "bar") == 0
        assert greeting.value() == "hi"
        assert app.remaining_arguments == ["foo", "bar"]
        assert app.error.getvalue() == ""

    def test_tolerant_parent_still_dispatches(self, app):
        """Test a tolerant parent still selects its sub-commands."""
        app.throw_on_unexpected_arg = False
        child = app.add_command("child")
        names = child.add_argument("names", multiple=True)
        child.on_execute(lambda: 6)

        assert app.execute("child", "a", "b") == 6
        assert names.values == ["a", "b"]
        assert app.remaining_arguments == []

    def test_remaining_arguments_on_parent(self, app):
        """Test a parent capturing remaining arguments keeps unknown positionals."""
        app.allow_remaining_arguments = True
        app.add_command("child")

        assert app.execute("foo") == 0
        assert app.remaining_arguments == ["foo"]

    def test_streams_inherited(self, app):
        """Test children write to their parent's streams."""
        child = app.add_command("child")

        assert child.out is app.out
        assert child.error is app.error

    def test_configure_runs_immediately(self, app):
        """Test the configure callback receives the child handle."""
        seen = []
        child = app.add_command("child", configure=seen.append)

        assert seen == [child]
        assert child.parent is app


@pytest.mark.unit
class TestHelpAndVersion:
    """Test help and version toggles."""

    def test_no_implicit_help(self, app):
        """Test --help is unknown unless declared."""
        assert app.execute("--help") == 2

    def test_help(self, app):
        """Test the declared help toggle prints usage."""
        app.description = "Does things"
        app.add_option("--name <name>", "Who to greet")
        app.set_help("-?|-h|--help")

        assert app.execute("-?") == 0
        output = app.out.getvalue()
        assert "Usage: app" in output
        assert "Does things" in output
        assert "Who to greet" in output

    def test_sub_command_help(self, app):
        """Test sub-command help shows the full command path and inherited options."""
        app.add_option("-u|--uppercase", "Shout", Arity.FLAG, inherited=True)
        app.add_option("--local", "Root only", Arity.FLAG)
        child = app.add_command("child")
        child.set_help("-h")

        output = child.get_help()

        assert "Usage: app child" in output
        assert "--uppercase" in output
        assert "--local" not in output

    def test_sub_command_help_toggle(self, app):
        """Test the help toggle of a selected sub-command."""
        app.add_option("-u|--uppercase", "Shout", Arity.FLAG, inherited=True)
        app.add_command("child").set_help("-h")

        assert app.execute("child", "-h") == 0
        output = app.out.getvalue()
        assert "Usage: app child" in output
        assert "--uppercase" in output

    def test_help_skips_callback(self, app):
        """Test help output ends the run."""
        calls = []
        app.on_execute(lambda: calls.append("app"))
        app.set_help("-h")

        app.execute("-h")

        assert calls == []

    def test_version(self, app):
        """Test version output is the full name then the long version."""
        app.full_name = "The App"
        app.set_version("--version", "1.2", "1.2.3 (build 7)")

        assert app.execute("--version") == 0
        assert app.out.getvalue() == "The App\n1.2.3 (build 7)\n"

    def test_long_version_falls_back_to_short(self, app):
        """Test a missing long version uses the short one."""
        app.set_version("--version", lambda: "1.0.1")

        app.execute("--version")

        assert app.long_version() == "1.0.1"
        assert app.out.getvalue() == "1.0.1\n"

    def test_full_name_and_version(self, app):
        """Test the combined name and short version."""
        app.full_name = "The App"
        assert app.full_name_and_version() == "The App"

        app.set_version("--version", "1.2", "1.2.3")
        assert app.full_name_and_version() == "The App 1.2"
