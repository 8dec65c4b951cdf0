"""Graph matching command-line applications: options, configuration and distance matrix."""

from __future__ import annotations

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Sequence

import networkx as nx

from gempp.console import ConsoleApplication

AUTO = "auto"

_CUT_METHODS = ("solution", "matchings", "elements")
_FORMULATIONS = ("linear", "quadratic", "bipartite")
_TOLERANCES = ("exact", "label", "topology")
_SOLVERS = ("Cplex", "GLPK", "Gurobi")

Matcher = Callable[[Any, Any, "MatchingConfig"], float]
Loader = Callable[[str], Any]


class ProblemType(Enum):
    """The kind of matching problem solved between two graphs."""

    NONE = "none"
    GED = "dist"
    SUBGRAPH = "sub"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @staticmethod
    def from_name(name: str) -> "ProblemType":
        """Return the problem type named by a command or a full name (any case)."""
        key = name.strip().lower()
        for problem_type, aliases in _ALIASES.items():
            if key in aliases:
                return problem_type
        raise ValueError(f"Unknown problem type '{name}'.")


_LABELS = {
    ProblemType.NONE: "None",
    ProblemType.GED: "Graph edit distance",
    ProblemType.SUBGRAPH: "Subgraph matching",
}

_ALIASES = {
    ProblemType.GED: ("dist", "distance", "ged", "graph edit distance"),
    ProblemType.SUBGRAPH: ("sub", "subgraph", "matching", "subgraph matching"),
}


def _choose(value: str, choices: Sequence[str], what: str) -> str:
    """Return the choice that the value abbreviates (s -> solution, ...)."""
    text = value.strip().lower()
    if text:
        for choice in choices:
            if choice.startswith(text):
                return choice
    raise ValueError(f"Unknown {what} '{value}'.")


def _to_int(value: str, option: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid value '{value}' for option '{option}'.") from None


def _to_float(value: str, option: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Invalid value '{value}' for option '{option}'.") from None


@dataclass
class MatchingConfig:
    """Settings of one matching run, as read from the command line."""

    matching_type: ProblemType = ProblemType.NONE
    substitution: str = ""
    creation: str = ""
    number: int = 1
    cut_method: str = "solution"
    program: str = ""
    solution: str = ""
    output_dir: str = ""
    ext: str = ""
    matrix: str = ""
    parallel_instances: int = 1
    threads_per_instance: int = field(default_factory=lambda: os.cpu_count() or 1)
    formulation: str = "linear"
    tolerance: str = "topology"
    induced: bool = False
    upperbound: float = 1.0
    time_limit: float = 0.0
    solver: str = "Gurobi"
    verbose: bool = False

    def check(self) -> None:
        """Raise ValueError if a setting is out of its allowed range."""
        if self.number < 1:
            raise ValueError(f"The number of solutions must be at least 1 ({self.number} given).")
        if not 0.0 < self.upperbound <= 1.0:
            raise ValueError("The exploration ratio must be in ]0%, 100%].")
        if self.time_limit < 0:
            raise ValueError("The time limit cannot be negative.")
        if self.parallel_instances < 1:
            raise ValueError("The number of jobs must be at least 1.")
        if self.threads_per_instance < 1:
            raise ValueError("The number of threads per instance must be at least 1.")
        if self.cut_method not in _CUT_METHODS:
            raise ValueError(f"Unknown cut method '{self.cut_method}'.")
        if self.formulation not in _FORMULATIONS:
            raise ValueError(f"Unknown formulation '{self.formulation}'.")
        if self.tolerance not in _TOLERANCES:
            raise ValueError(f"Unknown tolerance '{self.tolerance}'.")
        if self.solver.lower() not in {name.lower() for name in _SOLVERS}:
            raise ValueError(f"Unknown solver '{self.solver}'.")


def _read_graph(path: str) -> nx.Graph:
    suffix = Path(path).suffix.lower()
    if suffix == ".gml":
        return nx.read_gml(path)
    if suffix in (".graphml", ".xml"):
        return nx.read_graphml(path)
    raise ValueError(f"Unsupported graph file '{path}'.")


def _ask(prompt: str) -> bool:
    print(prompt)
    answer = sys.stdin.readline()
    return answer[:1] in ("y", "Y")


class MatchingApplication(ConsoleApplication):
    """Matches two graphs, or every pair of two sets of graphs, into a distance matrix."""

    def __init__(
        self,
        problem_type: ProblemType,
        multi: bool,
        matcher: Matcher,
        loader: Loader | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        super().__init__()
        self.problem_type = problem_type
        self.multi = multi
        self._matcher = matcher
        self._loader = loader if loader is not None else _read_graph
        self._confirm = confirm if confirm is not None else _ask
        self.config: MatchingConfig | None = None
        self.matrix: list[list[float]] | None = None
        self._same_lists = False
        self._pending: set[tuple[int, int]] = set()
        self._lock = threading.RLock()

    # Options

    def add_options(self) -> None:
        """Declare the options that fit the problem type and the multi mode."""
        self.add_option("s", "substitution", "Defines the weights for substitution costs.", "file.fw")
        self.add_option("c", "creation", "Defines the weights for creation costs.", "file.fw")
        self.add_option("n", "number", "Searches the 'n' best solutions.", "int")
        self.add_option("", "cut", "Defines the cut method (default : s).", "s/m/e", "s")
        if self.multi:
            self.add_option("p", "programs", "Outputs the programs.")
            self.add_option("o", "solutions", "Outputs the solutions.")
            self.add_option("d", "output-dir", "Sets the output directory.", "dir")
            self.add_option("", "ext", "Restricts the graph extension", ".gxl/.gml")
            self.add_option("m", "matrix", "Outputs the distances to the given file.", "file.mat")
            self.add_option("j", "jobs", "Sets the number of jobs to run simultaneously.", "int", "1")
        else:
            self.add_option("p", "program", "Outputs the program to the given file.", "file.mps/.lp")
            self.add_option("P", "auto-prog", "Shortcut for option '-p g1_g2.lp'.")
            self.add_option("o", "solution", "Outputs the solution to the given file.", "file.sol")
            self.add_option("O", "auto-sol", "Shortcut for option '-o g1_g2.sol'.")
        if self.problem_type is ProblemType.GED:
            self.add_option("f", "formulation", "Sets the formulation type (default : l).", "l/q/b", "l")
        elif self.problem_type is ProblemType.SUBGRAPH:
            self.add_option("t", "tolerance", "Sets the tolerance level (default : t).", "e/l/t", "t")
            self.add_option("i", "induced", "Performs induced subgraph matching.")
        self.add_option("e", "explore", "Upper bound approx (cols selection).", "0%-100%")
        self.add_option("", "time", "Maximum solving time for on instance.", "number in seconds")
        self.add_option("", "solver", "Sets the solver (default : Gurobi).", "Cplex/GLPK/Gurobi", "Gurobi")
        self.add_verbose_option()
        self.add_version_option()
        self.add_help_option()

    def init_configuration(self) -> MatchingConfig:
        """Build and check the configuration from the parsed options."""
        cfg = MatchingConfig(matching_type=self.problem_type)
        if self.is_option_set("substitution"):
            cfg.substitution = self.option_value("substitution")
        if self.is_option_set("creation"):
            cfg.creation = self.option_value("creation")
        if self.is_option_set("number"):
            cfg.number = _to_int(self.option_value("number"), "number")
        if self.is_option_set("cut"):
            cfg.cut_method = _choose(self.option_value("cut"), _CUT_METHODS, "cut method")

        if self.multi:
            if self.is_option_set("programs"):
                cfg.program = AUTO
            if self.is_option_set("solutions"):
                cfg.solution = AUTO
            if self.is_option_set("output-dir"):
                cfg.output_dir = self.option_value("output-dir")
            if self.is_option_set("ext"):
                cfg.ext = self.option_value("ext")
            if self.is_option_set("matrix"):
                cfg.matrix = self.option_value("matrix")
                target = Path(cfg.matrix) if cfg.matrix else None
                if target is not None and target.exists():
                    prompt = f"The file {cfg.matrix} already exists, do you want to overwrite it ? [y/N]"
                    if self._confirm(prompt):
                        target.unlink()
                    else:
                        print("Program interrupted by user.")
                        raise SystemExit(1)
            if self.is_option_set("jobs"):
                cfg.parallel_instances = _to_int(self.option_value("jobs"), "jobs")
            if cfg.parallel_instances > 0:
                cfg.threads_per_instance = max(cfg.threads_per_instance // cfg.parallel_instances, 1)
        else:
            if self.is_option_set("program"):
                cfg.program = self.option_value("program")
            elif self.is_option_set("auto-prog"):
                cfg.program = AUTO
            if self.is_option_set("solution"):
                cfg.solution = self.option_value("solution")
            elif self.is_option_set("auto-sol"):
                cfg.solution = AUTO

        if self.problem_type is ProblemType.GED:
            if self.is_option_set("formulation"):
                cfg.formulation = _choose(self.option_value("formulation"), _FORMULATIONS, "formulation")
        elif self.problem_type is ProblemType.SUBGRAPH:
            if self.is_option_set("tolerance"):
                cfg.tolerance = _choose(self.option_value("tolerance"), _TOLERANCES, "tolerance")
            cfg.induced = self.is_option_set("induced")

        if self.is_option_set("explore"):
            cfg.upperbound = _to_float(self.option_value("explore"), "explore") / 100
        if self.is_option_set("time"):
            cfg.time_limit = _to_float(self.option_value("time"), "time")
        if self.is_option_set("solver"):
            cfg.solver = self.option_value("solver")
        cfg.verbose = self.is_option_set("verbose")

        cfg.check()
        self.config = cfg
        return cfg

    # Matching

    @staticmethod
    def pairs(first: Sequence, second: Sequence) -> list[tuple[int, int, Any, Any]]:
        """List the (query index, target index, query, target) pairs to match.

        When both sequences are the same object only pairs above the diagonal
        are listed, since the distance matrix is symmetrized afterwards.
        """
        same = first is second
        return [
            (i, j, query, target)
            for i, query in enumerate(first)
            for j, target in enumerate(second)
            if not same or j > i
        ]

    def finished(self, query_index: int, target_index: int, objective: float) -> None:
        """Store one objective; finalize once the last pending matching is done."""
        if self.matrix is None:
            raise RuntimeError("The objective matrix must be initialized before updating.")
        self.matrix[query_index][target_index] = objective
        with self._lock:
            key = (query_index, target_index)
            if key in self._pending:
                self._pending.discard(key)
                if not self._pending:
                    self.finalize()

    def finalize(self) -> None:
        """Symmetrize if needed, then save the matrix to a file or print it."""
        if self.matrix is None:
            raise RuntimeError("The objective matrix must be initialized before updating.")
        if self.multi and self._same_lists:
            for i, row in enumerate(self.matrix):
                for j in range(i + 1, len(row)):
                    self.matrix[j][i] = row[j]
        text = "".join(" ".join(f"{value:g}" for value in row) + "\n" for row in self.matrix)
        path = self.config.matrix if self.config is not None else ""
        if path:
            Path(path).write_text(text, encoding="utf-8")
        else:
            print(text, end="")

    def _load_directory(self, path: str, ext: str) -> list:
        directory = Path(path)
        if not directory.is_dir():
            raise NotADirectoryError(f"'{path}' is not a directory.")
        suffix = ""
        if ext:
            suffix = (ext if ext.startswith(".") else "." + ext).lower()
        files = sorted(
            entry
            for entry in directory.iterdir()
            if entry.is_file()
            and not entry.name.startswith(".")
            and (not suffix or entry.suffix.lower() == suffix)
        )
        return [self._loader(str(entry)) for entry in files]

    def _solve(self, query_index: int, target_index: int, query: Any, target: Any) -> None:
        objective = self._matcher(query, target, self.config)
        self.finished(query_index, target_index, objective)

    def match(self, argv: Sequence[str] | None = None) -> list[list[float]] | None:
        """Parse the arguments, run every matching and return the distance matrix."""
        if argv is None:
            argv = sys.argv[1:]
        self.add_options()
        self.parse_arguments(argv)
        try:
            if self.errors:
                raise ValueError(self.errors[0])
            if self.is_option_set("help"):
                self.show_help()
            if self.is_option_set("version"):
                self.show_version()
            cfg = self.init_configuration()

            args = self.positional_arguments()
            if len(args) != 2:
                kind = "directories" if self.multi else "graphs"
                raise ValueError(f"You must provide exactly two {kind} ({len(args)} given)")

            if self.multi:
                first = self._load_directory(args[0], cfg.ext)
                second = first if args[0] == args[1] else self._load_directory(args[1], cfg.ext)
            else:
                first = [self._loader(args[0])]
                second = [self._loader(args[1])]
            self._same_lists = first is second
            self.matrix = [[0.0] * len(second) for _ in first]

            jobs = self.pairs(first, second)
            with self._lock:
                self._pending = {(i, j) for i, j, _, _ in jobs}
            if not jobs:
                self.finalize()
            else:
                with ThreadPoolExecutor(max_workers=cfg.parallel_instances) as pool:
                    futures = [pool.submit(self._solve, *job) for job in jobs]
                    for future in futures:
                        future.result()
        except Exception as exc:
            self.error(exc)
        return self.matrix