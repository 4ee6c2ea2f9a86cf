"""Greeting example: a root command with a ``name`` sub-command.

    python examples/greeting.py --greeting Howdy name John Jacob Jingle --uppercase
    python examples/greeting.py -v name Ada
    python examples/greeting.py --help
"""

import sys
from pathlib import Path
from typing import Annotated

import click

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clibind import (
    Argument,
    Command,
    CommandLine,
    CommandLineBinding,
    HelpOption,
    Option,
    VersionOption,
)
from clibind.exceptions import format_error_for_display
from clibind.utils import configure_logging


@CommandLine(description="Greets one or more people")
@HelpOption("-h|--help")
class NameModel:
    """The ``name`` sub-command: who to greet."""

    names: Annotated[list[str] | None, Argument("names", "People to greet")] = None

    def on_exec(self) -> int:
        return 0 if self.names else 1


@CommandLine("greeting", full_name="Greeting Example", description="Prints a greeting")
@HelpOption("-h|--help")
@VersionOption("--version", short_version="1.0.0", long_version="1.0.0 (example)")
class GreetingModel:
    greeting: Annotated[str, Option("-g|--greeting <greeting>", "Greeting to use")] = "Hello"
    uppercase: Annotated[bool, Option("-u|--uppercase", "Shout the greeting", inherited=True)] = False

    def __init__(self):
        self.names: list[str] = []
        self.verbose = False

    @Option("-v|--verbose", "Log binder activity")
    def enable_logging(self) -> None:
        self.verbose = True
        configure_logging(verbose=2)

    @Command("name")
    def name(self, model: NameModel) -> None:
        self.names = model.names

    def on_exec(self, command) -> int:
        if not self.names:
            click.echo(command.get_help(), file=command.out)
            return 0

        message = f"{self.greeting}, {' and '.join(self.names)}!"
        click.echo(message.upper() if self.uppercase else message, file=command.out)
        return 0


def main(argv: list[str]) -> int:
    try:
        binding = CommandLineBinding.build(GreetingModel)
    except Exception as e:
        message, hint = format_error_for_display(e)
        click.echo(f"Error: {message}", err=True)
        if hint:
            click.echo(f"Suggestion: {hint}", err=True)
        return 1

    return binding.execute(*argv)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
