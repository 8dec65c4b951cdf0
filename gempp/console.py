"""Command-line application support: options, positional arguments, help, version and errors."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable


class OptionError(ValueError):
    """Raised when an option is declared incorrectly."""


@dataclass(frozen=True)
class _Option:
    names: tuple[str, ...]
    description: str = ""
    value_name: str = ""
    default: str = ""

    @property
    def takes_value(self) -> bool:
        return bool(self.value_name)

    @property
    def flags(self) -> str:
        text = ", ".join(("-" if len(name) == 1 else "--") + name for name in self.names)
        if self.takes_value:
            text += f" <{self.value_name}>"
        return text


@dataclass(frozen=True)
class _Positional:
    name: str
    description: str
    syntax: str


def _table(rows: list[tuple[str, str]]) -> list[str]:
    width = max(len(left) for left, _ in rows)
    return [f"  {left.ljust(width)}  {right}".rstrip() for left, right in rows]


class ConsoleApplication:
    """A text-based application with option parsing, help and version display.

    Parsing is lenient: unknown options, missing and unexpected values are
    collected in :attr:`errors` instead of stopping the parse, so that a
    front command can read its own arguments and hand the rest on.
    """

    def __init__(self, name: str = "GEM++", version: str = "1.0.0") -> None:
        self.name = name
        self.version = version
        self.description = ""
        self.errors: list[str] = []
        self._options: list[_Option] = []
        self._by_name: dict[str, _Option] = {}
        self._positional_defs: list[_Positional] = []
        self._values: dict[_Option, list[str]] = {}
        self._positionals: list[str] = []

    # Declarations

    def append_description(self, text: str) -> None:
        """Append text to the application description."""
        self.description += text

    def add_positional_argument(self, name: str, description: str = "", syntax: str = "") -> None:
        """Declare a positional argument shown in the help text."""
        self._positional_defs.append(_Positional(name, description, syntax or name))

    def add_option(
        self,
        shortname: str = "",
        longname: str = "",
        description: str = "",
        value_name: str = "",
        default: str = "",
    ) -> bool:
        """Declare an option; return False if one of its names is already taken."""
        names = tuple(name for name in (shortname, longname) if name)
        if not names:
            raise OptionError("At least one name (short or long) must be given to an option.")
        if any(name in self._by_name for name in names):
            return False
        option = _Option(names, description, value_name, default)
        self._options.append(option)
        for name in names:
            self._by_name[name] = option
        return True

    def add_help_option(self) -> None:
        self.add_option("h", "help", "Displays this help.")

    def add_version_option(self) -> None:
        self.add_option("", "version", "Displays the application version.")

    def add_verbose_option(self) -> None:
        self.add_option("v", "verbose", "Shows additional information.")

    # Parsing

    def parse_arguments(self, argv: Iterable[str]) -> None:
        """Parse the arguments that follow the program name."""
        self._values = {}
        self._positionals = []
        self.errors = []
        tokens = iter(argv)
        only_positional = False
        for arg in tokens:
            if only_positional:
                self._positionals.append(arg)
            elif arg == "--":
                only_positional = True
            elif arg.startswith("--"):
                self._parse_long(arg, tokens)
            elif arg.startswith("-") and len(arg) > 1:
                self._parse_short(arg, tokens)
            else:
                self._positionals.append(arg)

    def _parse_long(self, arg: str, tokens) -> None:
        name, has_value, value = arg[2:].partition("=")
        option = self._by_name.get(name)
        if option is None:
            self.errors.append(f"Unknown option '{name}'.")
            return
        if option.takes_value:
            if not has_value:
                value = next(tokens, None)
                if value is None:
                    self.errors.append(f"Missing value after '{arg}'.")
                    return
            self._values.setdefault(option, []).append(value)
        elif has_value:
            self.errors.append(f"Unexpected value after '{arg}'.")
        else:
            self._values.setdefault(option, [])

    def _parse_short(self, arg: str, tokens) -> None:
        body = arg[1:]
        for index, char in enumerate(body):
            option = self._by_name.get(char)
            if option is None:
                self.errors.append(f"Unknown option '{char}'.")
                continue
            if not option.takes_value:
                self._values.setdefault(option, [])
                continue
            value = body[index + 1:]
            if value.startswith("="):
                value = value[1:]
            if not value:
                value = next(tokens, None)
                if value is None:
                    self.errors.append(f"Missing value after '-{char}'.")
                    return
            self._values.setdefault(option, []).append(value)
            return

    # Queries

    def is_option_set(self, name: str) -> bool:
        option = self._by_name.get(name)
        return option is not None and option in self._values

    def option_value(self, name: str) -> str:
        """Return the last value given to an option, or its default."""
        option = self._by_name.get(name)
        if option is None:
            return ""
        values = self._values.get(option)
        return values[-1] if values else option.default

    def positional_arguments(self) -> list[str]:
        return list(self._positionals)

    def clear_positional_arguments(self) -> None:
        """Forget the declared positional arguments (help text only)."""
        self._positional_defs.clear()

    # Output

    def help_text(self) -> str:
        usage = f"Usage: {self.name}"
        if self._options:
            usage += " [options]"
        syntax = " ".join(p.syntax for p in self._positional_defs)
        if syntax:
            usage += f" {syntax}"
        lines = [usage]
        if self.description:
            lines.append(self.description)
        if self._options:
            lines += ["", "Options:"]
            lines += _table([(opt.flags, opt.description) for opt in self._options])
        if self._positional_defs:
            lines += ["", "Arguments:"]
            lines += _table([(p.name, p.description) for p in self._positional_defs])
        return "\n".join(lines) + "\n"

    def _version_text(self) -> str:
        return f"{self.name} {self.version}\n"

    def show_version(self) -> None:
        """Print the name and version, then exit successfully."""
        sys.stdout.write(self._version_text())
        sys.stdout.flush()
        sys.exit(0)

    def show_help(self) -> None:
        """Print the help text, then exit successfully."""
        sys.stdout.write(self.help_text())
        sys.stdout.flush()
        sys.exit(0)

    def error(self, exc: BaseException) -> None:
        """Print an error message with a hint, then exit with failure."""
        print(exc, file=sys.stderr)
        print(f"Run '{self.name} -h' for help.", file=sys.stderr)
        raise SystemExit(1)