"""Homework 4: highest-scoring paths in a weighted DAG.

Graph file format, one entry per line:

    V <name> [START|END]
    E <name> <from> <to> <weight>

Part 1 finds the best local path (scores floored at 0, any start node),
part 2 the best path from the START node to the END node, and part 3 the
maximal-scoring segment of a genome under a GC-rich scoring scheme.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path

from coursework.core.exercise import ExerciseContext, ExerciseError, InputFormatError
from coursework.utils.read import NUCLEOTIDES, iter_lines, load_fasta

NODE_KEY = "V"
EDGE_KEY = "E"
START_KEY = "START"
END_KEY = "END"

BASE_SCORES = {"A": -1.49, "T": -1.49, "C": 0.74, "G": 0.74}


@dataclass
class Edge:
    name: str
    source: str
    target: str
    weight: int


@dataclass
class PathResult:
    score: float
    begin: str
    end: str
    path: str


@dataclass
class WeightedDAG:
    """Weighted directed acyclic graph with named nodes and edges."""

    nodes: list[str] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    start: str | None = None
    end: str | None = None

    def outgoing(self) -> dict[str, list[Edge]]:
        result: dict[str, list[Edge]] = {n: [] for n in self.nodes}
        for edge in self.edges:
            result[edge.source].append(edge)
        return result

    def in_degrees(self) -> dict[str, int]:
        result = {n: 0 for n in self.nodes}
        for edge in self.edges:
            result[edge.target] += 1
        return result

    def roots(self) -> set[str]:
        """Nodes without incoming edges."""
        return {n for n, degree in self.in_degrees().items() if degree == 0}

    def topological_order(self, outgoing: dict[str, list[Edge]] | None = None) -> list[str]:
        """Kahn's algorithm; raises ExerciseError on cycles."""
        in_degree = self.in_degrees()
        if outgoing is None:
            outgoing = self.outgoing()
        queue = deque(n for n in self.nodes if in_degree[n] == 0)
        order = []
        while queue:
            node = queue.popleft()
            order.append(node)
            for edge in outgoing[node]:
                in_degree[edge.target] -= 1
                if in_degree[edge.target] == 0:
                    queue.append(edge.target)
        if len(order) != len(self.nodes):
            raise ExerciseError("Graph contains a cycle")
        return order

    @staticmethod
    def _relax(
        order: list[str],
        outgoing: dict[str, list[Edge]],
        roots: set[str],
        floor: float | None,
    ) -> dict[str, tuple[float, Edge | None]]:
        scores: dict[str, tuple[float, Edge | None]] = {n: (0, None) for n in roots}
        for node in order:
            if node not in scores:
                continue
            base = scores[node][0]
            for edge in outgoing[node]:
                score = base + edge.weight
                if floor is not None:
                    score = max(floor, score)
                current = scores.get(edge.target)
                if current is None or score > current[0]:
                    scores[edge.target] = (score, edge)
        return scores

    def _trace(
        self, scores: dict[str, tuple[float, Edge | None]], end: str, stop_at_zero: bool
    ) -> PathResult:
        names = []
        node = end
        while True:
            score, edge = scores[node]
            if edge is None:
                break
            if stop_at_zero and score <= 0:
                break
            names.append(edge.name)
            node = edge.source
            if stop_at_zero and scores[node][0] <= 0:
                break
        return PathResult(
            score=scores[end][0],
            begin=node,
            end=end,
            path="".join(reversed(names)),
        )

    def best_local_path(self) -> PathResult:
        outgoing = self.outgoing()
        order = self.topological_order(outgoing)
        scores = self._relax(order, outgoing, self.roots(), floor=0)
        best_node = max(order, key=lambda n: scores.get(n, (0, None))[0])
        return self._trace(scores, best_node, stop_at_zero=True)

    def best_path_between(self, start: str, end: str) -> PathResult:
        outgoing = self.outgoing()
        order = self.topological_order(outgoing)
        scores = self._relax(order, outgoing, {start}, floor=None)
        if end not in scores:
            raise ExerciseError(f"Node '{end}' is not reachable from '{start}'")
        return self._trace(scores, end, stop_at_zero=False)


def parse_dag(path: Path) -> WeightedDAG:
    dag = WeightedDAG()
    known: set[str] = set()

    for line_number, line in enumerate(iter_lines(path), start=1):
        parts = line.split()
        if not parts:
            continue
        if parts[0] == NODE_KEY:
            if len(parts) < 2:
                raise InputFormatError(path, "node line needs a name", line_number)
            name = parts[1]
            dag.nodes.append(name)
            known.add(name)
            if len(parts) > 2:
                if parts[2] == START_KEY:
                    dag.start = name
                elif parts[2] == END_KEY:
                    dag.end = name
                else:
                    raise InputFormatError(path, f"unknown node key '{parts[2]}'", line_number)
        elif parts[0] == EDGE_KEY:
            if len(parts) < 5:
                raise InputFormatError(path, "edge line needs name, from, to, weight", line_number)
            name, source, target = parts[1:4]
            for node in (source, target):
                if node not in known:
                    raise InputFormatError(path, f"edge '{name}' uses unknown node '{node}'", line_number)
            try:
                weight = int(parts[4])
            except ValueError:
                raise InputFormatError(path, f"invalid edge weight '{parts[4]}'", line_number)
            dag.edges.append(Edge(name, source, target, weight))
        else:
            raise InputFormatError(path, f"unknown line type '{parts[0]}'", line_number)

    return dag


@dataclass
class SegmentResult:
    score: float
    begin: int
    end: int
    sequence: str


def max_scoring_segment(sequence: str) -> SegmentResult:
    """Maximal-scoring segment; begin is 1-based and end inclusive."""
    score = 0.0
    high_score = 0.0
    start = 0
    best_start = 0
    best_end = 0
    for i, base in enumerate(sequence):
        score += BASE_SCORES.get(base, 0.0)
        if score <= 0:
            score = 0.0
            start = i + 1
        elif score > high_score:
            high_score = score
            best_start = start
            best_end = i + 1
    return SegmentResult(
        score=high_score,
        begin=best_start + 1 if best_end else 0,
        end=best_end,
        sequence=sequence[best_start:best_end],
    )


def path_lines(result: PathResult) -> list[str]:
    return [
        f"Score: {result.score}",
        f"Begin: {result.begin}",
        f"End: {result.end}",
        f"Path: {result.path}",
    ]


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    dag = parse_dag(inputs[0])
    if not dag.nodes:
        raise InputFormatError(inputs[0], "graph has no nodes")

    lines = ["Part 1"]
    lines.extend(path_lines(dag.best_local_path()))

    lines.extend(["", "Part 2"])
    if dag.start is None or dag.end is None:
        raise InputFormatError(inputs[0], "graph needs START and END nodes")
    lines.extend(path_lines(dag.best_path_between(dag.start, dag.end)))

    lines.extend(["", "Part 3"])
    genome = load_fasta(inputs[1], alphabet=NUCLEOTIDES)
    lines.append(f"Fasta: {genome.file_name}")
    lines.extend(genome.stats_lines())
    segment = max_scoring_segment(genome.sequence)
    lines.extend([
        "",
        f"Score: {segment.score:.2f}",
        f"Begin: {segment.begin}",
        f"End: {segment.end}",
        f"Path: {segment.sequence}",
    ])
    return lines
