[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gempp"
version = "1.0.0"
description = "Graph matching command line, molecule graph hierarchization and edit cost learning"
requires-python = ">=3.10"
keywords = [
    "graph",
    "graph matching",
    "graph edit distance",
    "subgraph matching",
    "particle swarm",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "networkx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gempp = "gempp.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gempp"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
