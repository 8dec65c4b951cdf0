# gempp

Graph matching from the command line, plus a few graph tools usable as a
library:

- `gempp`, a command that computes graph edit distances or looks for
  subgraph matches, on a pair of graph files or on every pair drawn from
  two directories, and prints or saves the matrix of objective values;
- a molecule graph hierarchizer that collapses cycles and chains of
  simple edges into single vertices holding the collapsed subgraph;
- a particle swarm optimiser that searches edit cost weights by
  maximising a k-nearest-neighbour classification rate;
- toolkit-independent models of display pieces: vertex, edge and label
  items, and a spin box that edits numbers in scientific notation.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

`gempp` takes a command as its first positional argument, followed by
the options and arguments of that command:

```
gempp dist graph1.gml graph2.gml
gempp sub query.gml target.gml
gempp multidist dir1 dir2
gempp multisub queries targets
```

- `dist` computes the graph edit distance, `sub` looks for the query as
  a subgraph of the target. The names `distance`, `ged`, `subgraph` and
  `matching` are accepted too, in any case.
- The `multi` prefix takes two directories and matches every graph of
  the first one against every graph of the second one. Files are read in
  name order; hidden files are skipped. When both directories are the
  same path, each pair is solved once and the matrix is made symmetric.
- Graph files are read with networkx: `.gml` files as GML, `.graphml`
  and `.xml` files as GraphML. Other extensions are refused.
- The result is a matrix with one row per query graph and one column per
  target graph, printed one row per line (values separated by spaces),
  or written to the file given with `-m`/`--matrix`. If that file
  already exists, you are asked whether to overwrite it.
- `gempp GUI` starts an external program named `GEM++gui`, which is not
  part of this package.

Run `gempp --help` for the command list, `gempp dist --help` (or any
other command) for its options, and `gempp --version` for the version.

Options of every matching command:

| Option | Meaning |
| --- | --- |
| `-s`, `--substitution FILE` | weights file for substitution costs |
| `-c`, `--creation FILE` | weights file for creation costs |
| `-n`, `--number N` | number of best solutions to search (at least 1) |
| `--cut s/m/e` | cut method: solution, matchings or elements (default `s`) |
| `-e`, `--explore PERCENT` | upper bound approximation, in ]0, 100] |
| `--time SECONDS` | time limit for one instance |
| `--solver NAME` | `Cplex`, `GLPK` or `Gurobi` (default `Gurobi`) |
| `-v`, `--verbose` | verbose flag |
| `--version` | show the version and exit |
| `-h`, `--help` | show help and exit |

`dist` adds `-f`, `--formulation l/q/b` (linear, quadratic, bipartite);
`sub` adds `-t`, `--tolerance e/l/t` (exact, label, topology) and `-i`,
`--induced`. Values may be abbreviated to any prefix.

With a pair of graphs: `-p`/`--program FILE`, `-P`/`--auto-prog`,
`-o`/`--solution FILE`, `-O`/`--auto-sol`.
With directories: `-p`/`--programs`, `-o`/`--solutions`,
`-d`/`--output-dir DIR`, `--ext EXT` (only read files with this
extension), `-m`/`--matrix FILE`, `-j`/`--jobs N` (number of matchings
run at the same time, default 1).

## What the command does not do

The options are read and checked, but the built-in solver uses only a
few of them. Graph edit distance is networkx's exact
`graph_edit_distance`, where two vertices or two edges match when their
attributes are equal, limited by `--time` when given. Subgraph matching
reports `0` when the query is found in the target (as an induced
subgraph with `--induced`, as a monomorphism otherwise) and `inf`
otherwise. Weight files, the formulation, the tolerance, the number of
solutions, the cut method, the exploration ratio, the solver name and
the program and solution outputs have no effect on the result, and no
program or solution file is written. GXL files cannot be read.

The hierarchizer and the particle swarm have no command; they are used
from Python.

## Library

```python
from gempp.console import ConsoleApplication, OptionError
from gempp.matching import MatchingApplication, MatchingConfig, ProblemType
from gempp.factory import create_application
from gempp.hierarchizer import Hierarchizer, are_chainable, are_mergeable, is_admissible_chain
from gempp.swarm import Particle, ParticleSwarm
from gempp.spinbox import ScienceSpinBox, ValidatorState, is_intermediate_value_helper
from gempp.items import Color, MatchStatus, VertexItem, EdgeItem, LabelItem
```

- `create_application(problem_type, multi, matcher=None, loader=None)`
  builds a `MatchingApplication` with its help description and positional
  arguments. `matcher(query, target, config)` returns the objective of
  one pair, `loader(path)` reads one graph; both replace the built-in
  ones. `app.match(argv)` parses the arguments, runs the matchings and
  returns the matrix as a list of lists.
- `ConsoleApplication` declares options and positional arguments, parses
  leniently (problems are gathered in `errors`), and gives `help_text()`,
  `show_help()`, `show_version()` and `error(exc)`.
- `Hierarchizer(graph).extract()` takes a networkx graph and returns a
  networkx multigraph in which each cycle found from the first vertex
  (cycles sharing a vertex are fused), then each chain of edges whose
  endpoints have degree at most two, is replaced by one vertex. That
  vertex is named by the joined names of the vertices it replaces and
  holds their induced subgraph in its `graph` attribute. The groups found
  are kept in `cycles` and `chains`.
- `ParticleSwarm(train, valid, minimum, maximum, distance, rng=None)`
  searches weights (mappings from feature name to float) between
  `minimum` and `maximum`. `train` and `valid` map a class name to a
  sequence of graphs, with the same classes in both; `distance(query,
  target, weights)` gives one distance. Call `init(nb_particles,
  graphs_per_class, c1, c2, omega, following_ratio)` once, then
  `iterate()`; the fitness is the 5-nearest-neighbour classification rate.
  `lines()` and `save(path)` describe the swarm as text.
- `ScienceSpinBox` validates typed text (`validate`,
  `validate_and_interpret`), parses and formats numbers in exponential
  notation (`value_from_text`, `text_from_value`), and steps by
  multiplying or dividing by ten (`step_up`, `step_down`, `step_by`).
- `VertexItem`, `EdgeItem` and `LabelItem` hold geometry, colours and
  visibility; a vertex box never moves to negative coordinates, and
  `translate` and `fit` keep it inside a given area.