"""Option template parsing.

A template names an option by any combination of short names, long names
and a symbol, plus an optional value name, separated by ``|`` or spaces:

```
-n|--name|-# <Full Name>
```

A single dash introduces a short name (or a symbol when the name is one
non-letter character), a double dash a long name, and ``<...>`` the value
name shown in help.
"""

from dataclasses import dataclass, field


@dataclass(slots=True)
class OptionTemplate:
    """Names parsed from an option template."""

    short_names: list[str] = field(default_factory=list)
    long_names: list[str] = field(default_factory=list)
    symbol_names: list[str] = field(default_factory=list)
    value_name: str | None = None

    @property
    def flags(self) -> list[str]:
        """Command-line spellings of the option, short names first."""
        return (
            [f"-{name}" for name in self.short_names]
            + [f"-{name}" for name in self.symbol_names]
            + [f"--{name}" for name in self.long_names]
        )


def parse_option_template(template: str) -> OptionTemplate:
    """
    Parse an option template into its names.

    Args:
        template: Template such as ``-g|--greeting <greeting>``

    Returns:
        Parsed OptionTemplate

    Raises:
        ValueError: If a part is not a name or value placeholder, or the
            template names no option at all
    """
    parsed = OptionTemplate()
    value_name: list[str] = []

    for part in template.replace("|", " ").split():
        if value_name:
            # Value names may contain spaces: "<Full Name>"
            value_name.append(part)
            if part.endswith(">"):
                parsed.value_name = " ".join(value_name)[1:-1]
                value_name = []
        elif part.startswith("--") and len(part) > 2:
            parsed.long_names.append(part[2:])
        elif part.startswith("-") and len(part) > 1:
            name = part[1:]
            if len(name) == 1 and not name.isalpha():
                parsed.symbol_names.append(name)
            else:
                parsed.short_names.append(name)
        elif part.startswith("<"):
            if part.endswith(">"):
                parsed.value_name = part[1:-1]
            else:
                value_name = [part]
        else:
            raise ValueError(f"Invalid template pattern '{template}'")

    if value_name or not parsed.flags:
        raise ValueError(f"Invalid template pattern '{template}'")

    return parsed
