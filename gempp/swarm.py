"""Particle swarm optimisation of edit cost weights.

Weights are plain mappings from a feature name to a float. A particle
moves through the weight space, guided by its own best position and by the
best position among the particles it follows. The fitness of a set of
weights is the k-nearest-neighbour classification rate of validation graphs
against training graphs, using a caller-supplied distance function.
"""

from __future__ import annotations

import math
import random
from pathlib import Path
from typing import Callable, Hashable, Mapping, Sequence

Weights = dict[str, float]
GraphSet = Mapping[str, Sequence[Hashable]]
Distance = Callable[[object, object, Mapping[str, float]], float]

_INDENT = "  "


def _scaled(weights: Mapping[str, float], factor: float) -> Weights:
    return {key: value * factor for key, value in weights.items()}


def _sum(first: Mapping[str, float], second: Mapping[str, float]) -> Weights:
    total = dict(first)
    for key, value in second.items():
        total[key] = total.get(key, 0.0) + value
    return total


def _indented(lines: list[str]) -> list[str]:
    return [_INDENT + line for line in lines]


class Particle:
    """One particle: its trajectory, fitness history, velocity and guides."""

    def __init__(self, identifier: int, position: Mapping[str, float], fitness: float) -> None:
        self.identifier = identifier
        self.positions: list[Weights] = [dict(position)]
        self.fitnesses: list[float] = [fitness]
        self.followed: list[Particle] = []
        self.velocity: Weights = _scaled(position, 0.0)
        self._best_iteration = 0

    @property
    def init_position(self) -> Weights:
        return self.positions[0]

    @property
    def init_fitness(self) -> float:
        return self.fitnesses[0]

    @property
    def best_position(self) -> Weights:
        return self.positions[self._best_iteration]

    @property
    def best_fitness(self) -> float:
        return self.fitnesses[self._best_iteration]

    def position(self, iteration: int) -> Weights:
        return self.positions[iteration]

    def fitness(self, iteration: int) -> float:
        return self.fitnesses[iteration]

    def follow(self, other: "Particle") -> None:
        """Add a particle whose best position may guide this one."""
        self.followed.append(other)

    def _guide(self) -> Weights:
        if not self.followed:
            raise LookupError(f"Particle {self.identifier} follows no other particle.")
        best_fitness = 0.0
        guide = self.followed[0]
        for other in self.followed:
            if other.best_fitness > best_fitness:
                best_fitness = other.best_fitness
                guide = other
        return guide.best_position

    def update_velocity(self, c1: float, c2: float, omega: float, rng=random) -> None:
        """Blend inertia, attraction to the own best and to the guide's best."""
        r1 = rng.random()
        r2 = rng.random()
        velocity = _scaled(self.velocity, omega)
        velocity = _sum(velocity, _scaled(self.best_position, c1 * r1))
        velocity = _sum(velocity, _scaled(self._guide(), c2 * r2))
        velocity = _sum(velocity, _scaled(self.positions[-1], -c1 * r1 - c2 * r2))
        self.velocity = velocity

    def update_position(self) -> None:
        self.positions.append(_sum(self.positions[-1], self.velocity))

    def update_fitness(self, fitness: float) -> None:
        """Record the fitness of the latest position and track the best one."""
        self.fitnesses.append(fitness)
        if len(self.fitnesses) != len(self.positions):
            raise RuntimeError(
                f"Fitness and position of particle {self.identifier} were not consistent "
                f"during iteration {len(self.positions) - 1}."
            )
        if fitness >= self.best_fitness:
            self._best_iteration = len(self.fitnesses) - 1

    def lines(self) -> list[str]:
        """Describe the particle as indented text lines."""
        body = ["followed {"]
        body += _indented([str(other.identifier) for other in self.followed])
        body.append("}")
        for iteration, (position, fitness) in enumerate(zip(self.positions, self.fitnesses)):
            step = ["position {"]
            step += _indented([f"{key} : {value:g}" for key, value in position.items()])
            step.append("}")
            step.append(f"fitness : {fitness:g}")
            body.append(f"iteration {iteration} {{")
            body += _indented(step)
            body.append("}")
        return [f"Particle {self.identifier} {{", *_indented(body), "}"]

    def save(self, path) -> None:
        Path(path).write_text("\n".join(self.lines()) + "\n", encoding="utf-8")


class ParticleSwarm:
    """A swarm searching the weights between a minimum and a maximum."""

    def __init__(
        self,
        train: GraphSet,
        valid: GraphSet,
        minimum: Mapping[str, float],
        maximum: Mapping[str, float],
        distance: Distance,
        rng=None,
    ) -> None:
        self.train = train
        self.valid = valid
        self.minimum = dict(minimum)
        self.maximum = dict(maximum)
        self.distance = distance
        self.rng = rng if rng is not None else random.Random()
        self.particles: list[Particle] = []
        self.graphs_per_class = 0
        self.iteration = 0
        self.c1 = self.c2 = self.omega = 0.0
        self.distances: list[list[float]] = []

    def _permutation(self, size: int) -> list[int]:
        return self.rng.sample(range(size), size)

    def init(
        self,
        nb_particles: int,
        graphs_per_class: int,
        c1: float,
        c2: float,
        omega: float,
        following_ratio: float,
    ) -> None:
        """Scatter the particles randomly and choose whom each one follows."""
        rows = len(self.valid) * graphs_per_class
        cols = len(self.train) * graphs_per_class
        self.distances = [[0.0] * cols for _ in range(rows)]
        self.iteration = 0
        self.graphs_per_class = graphs_per_class
        self.c1, self.c2, self.omega = c1, c2, omega
        self.particles = []

        for k in range(nb_particles):
            weights = dict(self.minimum)
            for key, low in self.minimum.items():
                p = self.rng.random()
                weights[key] = p * low + (1 - p) * self.maximum[key]
            self.particles.append(Particle(k, weights, self.compute_fitness(weights)))

        to_follow = math.ceil((nb_particles - 1) * following_ratio)
        to_follow = min(to_follow, nb_particles - 1)
        for k, particle in enumerate(self.particles):
            ids = [i for i in self._permutation(nb_particles) if i != k]
            for i in ids[:max(to_follow, 0)]:
                particle.follow(self.particles[i])

    def iterate(self) -> None:
        """Move every particle once and evaluate its new position."""
        self.iteration += 1
        for particle in self.particles:
            particle.update_velocity(self.c1, self.c2, self.omega, self.rng)
            particle.update_position()
            particle.update_fitness(self.compute_fitness(particle.position(self.iteration)))

    def _sample(self, graphs: Sequence, graph_class: str) -> list:
        if len(graphs) < self.graphs_per_class:
            raise ValueError(
                f"Class '{graph_class}' holds {len(graphs)} graphs, "
                f"{self.graphs_per_class} are needed."
            )
        order = self._permutation(len(graphs))
        return [graphs[i] for i in order[:self.graphs_per_class]]

    def compute_fitness(self, weights: Mapping[str, float]) -> float:
        """Match sampled validation graphs to sampled training graphs; return the 5-NN score."""
        train_classes = set(self.train)
        valid_classes = set(self.valid)
        if not self.train or len(train_classes & valid_classes) != len(self.train):
            raise ValueError(
                "ParticleSwarm can't compute classification score as the classes of the train "
                "and valid graph sets are inconsistent or inexistant."
            )
        subtrain: list = []
        subvalid: list = []
        for graph_class, graphs in self.train.items():
            subtrain += self._sample(graphs, graph_class)
            subvalid += self._sample(self.valid[graph_class], graph_class)

        for v, query in enumerate(subvalid):
            for t, target in enumerate(subtrain):
                self.distances[v][t] = self.distance(query, target, weights)
        return self.knn_score(5)

    def knn_score(self, k: int) -> float:
        """Classify each row by its k nearest columns; return the rate of correct rows.

        The distance matrix is consumed: chosen neighbours are set to infinity.
        """
        if not self.distances:
            raise ValueError("The distance matrix is empty.")
        gpc = self.graphs_per_class
        correct = 0
        for v, row in enumerate(self.distances):
            votes = [0] * len(self.train)
            for nearest in sorted(row)[:k]:
                column = row.index(nearest)
                row[column] = math.inf
                votes[column // gpc] += 1
            guess = max(range(len(votes)), key=lambda c: (votes[c], -c)) if votes else -1
            correct += guess == v // gpc
        return correct / len(self.distances)

    def lines(self) -> list[str]:
        """Describe the swarm as indented text lines."""
        particles = [line for particle in self.particles for line in particle.lines()]
        body = [f"iterations : {self.iteration}", "particles {", *_indented(particles), "}"]
        return ["ParticleSwarm {", *_indented(body), "}"]

    def save(self, path) -> None:
        Path(path).write_text("\n".join(self.lines()) + "\n", encoding="utf-8")