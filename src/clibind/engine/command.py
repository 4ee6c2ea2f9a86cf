"""Command handles: a registration surface over click.

A CommandHandle collects options, arguments, sub-commands, help and version
toggles the way a command-line application is configured, then materializes
them into click commands each time it runs. Values recognized by click are
recorded on the individual OptionHandle/ArgumentHandle objects, so callers
can ask "was this supplied, and with what" without touching click contexts.

Semantics:
    - Only the deepest matched command's terminal callback fires. Ancestors
      still record their own option values while their tokens are parsed.
    - After a terminal callback returns, the handle's post-invocation
      callbacks run in registration order.
    - No implicit ``--help``: help exists only when declared with set_help().
    - Options registered with ``inherited=True`` are accepted by every
      descendant command and record into the same handle.

Example:
    ```python
    app = CommandHandle("greet")
    loud = app.add_option("-l|--loud", "Shout", Arity.FLAG)
    names = app.add_argument("names", multiple=True)
    app.on_execute(lambda: print(names.values, loud.has_value()) or 0)
    app.execute("-l", "Ada", "Grace")
    ```
"""

import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any, TextIO

import click
from click.core import ParameterSource

from clibind.models.enums import Arity

from .templates import parse_option_template

logger = logging.getLogger(__name__)

VersionSource = str | Callable[[], str | None] | None

DEFAULT_HELP_DESCRIPTION = "Show help information"
DEFAULT_VERSION_DESCRIPTION = "Show version information"


def _resolve(source: VersionSource) -> str | None:
    return source() if callable(source) else source


def _supplied(ctx: click.Context, param: click.Parameter) -> bool:
    return ctx.get_parameter_source(param.name) is ParameterSource.COMMANDLINE


class OptionHandle:
    """A registered option and the values recognized for it during the last run."""

    def __init__(
        self,
        template: str,
        description: str = "",
        arity: Arity = Arity.SINGLE,
        inherited: bool = False,
    ):
        parsed = parse_option_template(template)
        self.template = template
        self.description = description
        self.arity = arity
        self.inherited = inherited
        self.flags = parsed.flags
        self.value_name = parsed.value_name
        self._present = False
        self._values: list[str] = []

    def has_value(self) -> bool:
        """True if the option appeared on the command line."""
        return self._present

    def value(self) -> str | None:
        """First recorded value, or None."""
        return self._values[0] if self._values else None

    @property
    def values(self) -> list[str]:
        """All recorded values in command-line order."""
        return list(self._values)

    def reset(self) -> None:
        self._present = False
        self._values = []

    def _recognize(self, ctx: click.Context, param: click.Parameter, value: Any) -> Any:
        if not _supplied(ctx, param):
            return value
        self._present = True
        if self.arity is Arity.MULTIPLE:
            self._values.extend(value)
        elif self.arity is Arity.SINGLE:
            self._values = [value]
        return value

    def to_click(self, param_name: str) -> click.Option:
        """Build the click option for one command, recording into this handle."""
        decls = [*self.flags, param_name]
        if self.arity is Arity.FLAG:
            return click.Option(
                decls,
                is_flag=True,
                default=False,
                help=self.description or None,
                callback=self._recognize,
            )
        return click.Option(
            decls,
            multiple=self.arity is Arity.MULTIPLE,
            metavar=self.value_name,
            help=self.description or None,
            callback=self._recognize,
        )

    def __repr__(self) -> str:
        return f"OptionHandle({self.template!r}, arity={self.arity.value})"


class ArgumentHandle:
    """A positional argument and the values recorded for it during the last run."""

    def __init__(self, name: str, description: str = "", multiple: bool = False):
        self.name = name
        self.description = description
        self.multiple = multiple
        self._values: list[str] = []

    @property
    def value(self) -> str | None:
        return self._values[0] if self._values else None

    @property
    def values(self) -> list[str]:
        return list(self._values)

    def reset(self) -> None:
        self._values = []

    def _recognize(self, ctx: click.Context, param: click.Parameter, value: Any) -> Any:
        if _supplied(ctx, param) and value is not None:
            self._values = list(value) if self.multiple else [value]
        return value

    def to_click(self, param_name: str) -> click.Argument:
        return click.Argument(
            [param_name],
            nargs=-1 if self.multiple else 1,
            required=False,
            metavar=self.name.upper(),
            callback=self._recognize,
        )

    def __repr__(self) -> str:
        return f"ArgumentHandle({self.name!r}, multiple={self.multiple})"


class _Unclaimed(Exception):
    """Raised when a group's leftover tokens do not start with a sub-command name."""

    def __init__(self, tokens: list[str]):
        super().__init__(tokens)
        self.tokens = tokens


class TolerantGroup(click.Group):
    """
    A group that keeps leftover tokens for itself.

    click resolves the first leftover token of a group as a sub-command
    name. When that token names no sub-command, this group runs its own
    callback instead, with every leftover token in ``ctx.args``.
    """

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if self.get_command(ctx, args[0]) is None:
            raise _Unclaimed(args)
        return super().resolve_command(ctx, args)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except _Unclaimed as unclaimed:
            ctx.args = list(unclaimed.tokens)
            ctx.invoked_subcommand = None
            return click.Command.invoke(self, ctx)


class CommandHandle:
    """
    One command of a command-line application.

    Attributes:
        name: Name used to invoke the command (and in usage lines)
        full_name: Display name printed by the version toggle
        description: Help text
        allow_argument_separator: Tokens after ``--`` become remaining arguments
        throw_on_unexpected_arg: Reject unknown options and extra tokens
        allow_remaining_arguments: Accept extra positional tokens even when
            throw_on_unexpected_arg is set
        remaining_arguments: Tokens left unconsumed by the last run
        parent: Enclosing command, or None for the root
    """

    def __init__(
        self,
        name: str = "",
        full_name: str = "",
        description: str = "",
        allow_argument_separator: bool = False,
        throw_on_unexpected_arg: bool = True,
        parent: "CommandHandle | None" = None,
    ):
        self.name = name
        self.full_name = full_name
        self.description = description
        self.allow_argument_separator = allow_argument_separator
        self.throw_on_unexpected_arg = throw_on_unexpected_arg
        self.allow_remaining_arguments = False
        self.parent = parent

        self.options: list[OptionHandle] = []
        self.arguments: list[ArgumentHandle] = []
        self.commands: list[CommandHandle] = []
        self.help_option: OptionHandle | None = None
        self.version_option: OptionHandle | None = None
        self.remaining_arguments: list[str] = []

        self._short_version: VersionSource = None
        self._long_version: VersionSource = None
        self._on_execute: Callable[[], Any] | None = None
        self._after_execute: list[Callable[[], Any]] = []
        self._out: TextIO | None = None
        self._error: TextIO | None = None

    # -- Streams ------------------------------------------------------------

    @property
    def out(self) -> TextIO:
        """Output stream; defaults to the parent's, then sys.stdout."""
        if self._out is not None:
            return self._out
        return self.parent.out if self.parent is not None else sys.stdout

    @out.setter
    def out(self, stream: TextIO | None) -> None:
        self._out = stream

    @property
    def error(self) -> TextIO:
        """Error stream; defaults to the parent's, then sys.stderr."""
        if self._error is not None:
            return self._error
        return self.parent.error if self.parent is not None else sys.stderr

    @error.setter
    def error(self, stream: TextIO | None) -> None:
        self._error = stream

    # -- Registration -------------------------------------------------------

    def add_option(
        self,
        template: str,
        description: str = "",
        arity: Arity = Arity.SINGLE,
        inherited: bool = False,
        configure: Callable[[OptionHandle], Any] | None = None,
    ) -> OptionHandle:
        """
        Register an option.

        Args:
            template: Option template, e.g. ``-g|--greeting <greeting>``
            description: Help text
            arity: Value cardinality
            inherited: Also accept the option on every descendant command
            configure: Called with the new handle before it is returned

        Returns:
            The registered OptionHandle
        """
        option = OptionHandle(template, description, arity, inherited)
        self.options.append(option)
        if configure is not None:
            configure(option)
        return option

    def add_argument(
        self,
        name: str,
        description: str = "",
        multiple: bool = False,
        configure: Callable[[ArgumentHandle], Any] | None = None,
    ) -> ArgumentHandle:
        """Register a positional argument. Arguments consume tokens in registration order."""
        argument = ArgumentHandle(name, description, multiple)
        self.arguments.append(argument)
        if configure is not None:
            configure(argument)
        return argument

    def add_command(
        self,
        name: str,
        configure: Callable[["CommandHandle"], Any] | None = None,
        throw_on_unexpected_arg: bool = True,
    ) -> "CommandHandle":
        """Register a sub-command and return its handle."""
        child = CommandHandle(name, throw_on_unexpected_arg=throw_on_unexpected_arg, parent=self)
        self.commands.append(child)
        if configure is not None:
            configure(child)
        return child

    def set_help(self, template: str, description: str = DEFAULT_HELP_DESCRIPTION) -> OptionHandle:
        """Declare the help toggle."""
        self.help_option = OptionHandle(template, description, Arity.FLAG)
        return self.help_option

    def set_version(
        self,
        template: str,
        short_version: VersionSource,
        long_version: VersionSource = None,
        description: str = DEFAULT_VERSION_DESCRIPTION,
    ) -> OptionHandle:
        """
        Declare the version toggle.

        Either version may be a string or a zero-argument callable resolved
        when the version is shown. A missing long version falls back to the
        short one.
        """
        self._short_version = short_version
        self._long_version = long_version if long_version is not None else short_version
        self.version_option = OptionHandle(template, description, Arity.FLAG)
        return self.version_option

    def on_execute(self, callback: Callable[[], Any]) -> None:
        """Set the terminal callback. An int return value becomes the exit code."""
        self._on_execute = callback

    def after_execute(self, callback: Callable[[], Any]) -> None:
        """Add a callback that runs after this command's terminal callback."""
        self._after_execute.append(callback)

    # -- Information --------------------------------------------------------

    def short_version(self) -> str | None:
        return _resolve(self._short_version)

    def long_version(self) -> str | None:
        return _resolve(self._long_version)

    def full_name_and_version(self) -> str:
        """Full name followed by the short version, when there is one."""
        short = self.short_version()
        return self.full_name if short is None else f"{self.full_name} {short}"

    @property
    def accepts_extra_tokens(self) -> bool:
        """True if tokens no parameter or sub-command consumes are kept."""
        return (
            not self.throw_on_unexpected_arg
            or self.allow_remaining_arguments
            or self.allow_argument_separator
        )

    def ancestors(self) -> list["CommandHandle"]:
        """Enclosing commands, root first."""
        chain: list[CommandHandle] = []
        handle = self.parent
        while handle is not None:
            chain.insert(0, handle)
            handle = handle.parent
        return chain

    def inherited_options(self) -> list[OptionHandle]:
        """Options passed down to this command by its ancestors."""
        return [
            option
            for ancestor in self.ancestors()
            for option in ancestor.options
            if option.inherited
        ]

    def get_help(self) -> str:
        """Render the help text for this command, with its full command path."""
        parent_ctx = None
        for ancestor in self.ancestors():
            parent_ctx = click.Context(
                click.Command(ancestor.name, add_help_option=False),
                info_name=ancestor.name,
                parent=parent_ctx,
            )

        command = self.to_click(self.inherited_options())
        with click.Context(command, info_name=self.name, parent=parent_ctx) as ctx:
            return command.get_help(ctx)

    def show_version(self) -> None:
        if self.full_name:
            click.echo(self.full_name, file=self.out)
        click.echo(self.long_version() or "", file=self.out)

    # -- Execution ----------------------------------------------------------

    def fire(self) -> int:
        """Run the terminal callback, then the post-invocation callbacks."""
        result = self._on_execute() if self._on_execute is not None else 0
        for callback in self._after_execute:
            callback()
        return result if isinstance(result, int) else 0

    def execute(self, *args: str) -> int:
        """
        Parse ``args`` and run the matched command.

        Parse errors are written to the error stream and reported through
        the returned exit code. Exceptions raised by callbacks propagate.

        Returns:
            Exit code of the matched command's terminal callback, 0 after
            help or version output, or click's exit code for parse errors
        """
        self._reset()
        command = self.to_click()
        logger.debug(f"Executing command '{self.name}' with args {list(args)}")

        try:
            result = command.main(args=list(args), prog_name=self.name, standalone_mode=False)
        except click.ClickException as e:
            logger.debug(f"Command line rejected: {e.format_message()}")
            e.show(file=self.error)
            return e.exit_code
        except click.Abort:
            click.echo("Aborted!", file=self.error)
            return 1

        return result if isinstance(result, int) else 0

    def to_click(self, inherited: Sequence[OptionHandle] = ()) -> click.Command:
        """
        Materialize this command (and its sub-commands) as click commands.

        Args:
            inherited: Options passed down from ancestor commands
        """
        params: list[click.Parameter] = [
            option.to_click(f"option_{index}")
            for index, option in enumerate([*inherited, *self.options])
        ]
        params += [
            argument.to_click(f"argument_{index}")
            for index, argument in enumerate(self.arguments)
        ]
        if self.help_option is not None:
            params.append(self._toggle(self.help_option, "show_help", self._show_help))
        if self.version_option is not None:
            params.append(self._toggle(self.version_option, "show_version", self._show_version))

        context_settings: dict[str, Any] = {"help_option_names": []}
        if not self.throw_on_unexpected_arg:
            context_settings["ignore_unknown_options"] = True
        if self.accepts_extra_tokens:
            context_settings["allow_extra_args"] = True

        attrs = dict(
            name=self.name,
            params=params,
            callback=self._callback(),
            help=self.description or None,
            context_settings=context_settings,
            add_help_option=False,
        )
        if not self.commands:
            return click.Command(**attrs)

        group_class = TolerantGroup if self.accepts_extra_tokens else click.Group
        group = group_class(invoke_without_command=True, **attrs)
        passed_down = [*inherited, *(option for option in self.options if option.inherited)]
        for child in self.commands:
            group.add_command(child.to_click(passed_down))
        return group

    def _callback(self) -> Callable[..., Any]:
        @click.pass_context
        def invoke(ctx: click.Context, **_params: Any) -> int | None:
            # Ancestors of the matched command only parse
            if ctx.invoked_subcommand is not None:
                return None
            self.remaining_arguments = list(ctx.args)
            return self.fire()

        return invoke

    def _toggle(
        self,
        option: OptionHandle,
        param_name: str,
        action: Callable[[], None],
    ) -> click.Option:
        def callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
            if not value or ctx.resilient_parsing:
                return
            action()
            ctx.exit(0)

        return click.Option(
            [*option.flags, param_name],
            is_flag=True,
            default=False,
            expose_value=False,
            is_eager=True,
            help=option.description or None,
            callback=callback,
        )

    def _show_help(self) -> None:
        click.echo(self.get_help(), file=self.out)

    def _show_version(self) -> None:
        self.show_version()

    def _reset(self) -> None:
        for option in self.options:
            option.reset()
        for argument in self.arguments:
            argument.reset()
        self.remaining_arguments = []
        for child in self.commands:
            child._reset()

    def __repr__(self) -> str:
        return f"CommandHandle({self.name!r}, commands={[c.name for c in self.commands]})"
