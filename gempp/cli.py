"""The front command: picks a matching command and hands it the other arguments."""

from __future__ import annotations

import subprocess
import sys
from typing import Sequence

from gempp.console import ConsoleApplication
from gempp.factory import create_application
from gempp.matching import ProblemType

GUI_PROGRAM = "GEM++gui"


def _core_application() -> ConsoleApplication:
    app = ConsoleApplication()
    app.description = (
        "GEM++ command line interface gives access to the commands of the GEM++ framework."
    )
    app.add_help_option()
    app.add_version_option()
    app.add_positional_argument("command", "A GEM++ command (dist, sub, multidist, multisub, GUI)", "command")
    return app


def split_command(argv: Sequence[str]) -> tuple[str, list[str]]:
    """Return the command named in the arguments and the arguments without it."""
    args = list(argv)
    app = _core_application()
    app.parse_arguments(args)
    positionals = app.positional_arguments()
    if not positionals:
        raise ValueError("You must provide a GEM++ command.")
    command = positionals[0]
    index = args.index(command)
    return command, args[:index] + args[index + 1:]


def main(argv: Sequence[str] | None = None) -> int:
    """Run the front command and return its exit status."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    core = _core_application()
    try:
        core.parse_arguments(argv)
        if core.is_option_set("version"):
            core.show_version()
        if not core.positional_arguments() and core.is_option_set("help"):
            core.show_help()
        command, rest = split_command(argv)

        if command.lower() == "gui":
            return subprocess.call([GUI_PROGRAM])

        multi = "multi" in command.lower()
        name = command.replace("multi", "") if multi else command
        problem_type = ProblemType.from_name(name)

        app = create_application(problem_type, multi)
        app.name = f"{core.name} {command}"
        app.match(rest)
    except Exception as exc:
        core.error(exc)
    return 0