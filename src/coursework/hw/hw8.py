"""Homework 8: Baum-Welch training of a two-state DNA HMM.

State 1 is AT-rich, state 2 GC-rich. Forward and backward passes are
scaled per position so long genomes do not underflow; the log-likelihood
is the sum of the log scale factors. Training stops once an iteration
changes the log-likelihood by no more than the tolerance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from coursework.core.exercise import ExerciseContext, ExerciseError
from coursework.utils.read import load_fasta

logger = structlog.get_logger(__name__)

BASES = "ACGT"
TOLERANCE = 0.1
MAX_ITERATIONS = 500


@dataclass
class HMMParameters:
    start: list[float] = field(default_factory=lambda: [0.996, 0.004])
    transitions: list[list[float]] = field(
        default_factory=lambda: [[0.999, 0.001], [0.01, 0.99]]
    )
    emissions: list[dict[str, float]] = field(
        default_factory=lambda: [
            {"A": 0.3, "T": 0.3, "G": 0.2, "C": 0.2},
            {"A": 0.15, "T": 0.15, "G": 0.35, "C": 0.35},
        ]
    )

    @property
    def states(self) -> range:
        return range(len(self.start))


@dataclass
class TrainingResult:
    iterations: int
    log_likelihood: float
    parameters: HMMParameters


def forward(sequence: str, params: HMMParameters) -> tuple[list[list[float]], list[float]]:
    """Scaled forward probabilities and the per-position scale factors."""
    states = params.states
    alpha: list[list[float]] = []
    scales: list[float] = []
    prev: list[float] | None = None
    for c in sequence:
        if prev is None:
            values = [params.start[i] * params.emissions[i][c] for i in states]
        else:
            values = [
                params.emissions[i][c]
                * sum(prev[j] * params.transitions[j][i] for j in states)
                for i in states
            ]
        scale = sum(values)
        if scale == 0:
            raise ExerciseError(f"Sequence has zero probability under the model at base '{c}'")
        prev = [v / scale for v in values]
        alpha.append(prev)
        scales.append(scale)
    return alpha, scales


def backward(sequence: str, params: HMMParameters, scales: list[float]) -> list[list[float]]:
    """Backward probabilities scaled with the forward scale factors."""
    states = params.states
    n = len(sequence)
    beta: list[list[float]] = [[]] * n
    beta[n - 1] = [1.0 for _ in states]
    for t in range(n - 2, -1, -1):
        c = sequence[t + 1]
        following = beta[t + 1]
        beta[t] = [
            sum(
                params.transitions[i][j] * params.emissions[j][c] * following[j]
                for j in states
            )
            / scales[t + 1]
            for i in states
        ]
    return beta


def log_likelihood(scales: list[float]) -> float:
    return sum(math.log(s) for s in scales)


def reestimate(sequence: str, params: HMMParameters) -> tuple[float, HMMParameters]:
    """One Baum-Welch step: the current log-likelihood and updated parameters."""
    states = params.states
    alpha, scales = forward(sequence, params)
    beta = backward(sequence, params, scales)

    gamma_totals = [0.0 for _ in states]
    # Occupancy over positions that have a successor
    leaving_totals = [0.0 for _ in states]
    emitted = [{b: 0.0 for b in BASES} for _ in states]
    xi_totals = [[0.0 for _ in states] for _ in states]

    n = len(sequence)
    for t, c in enumerate(sequence):
        for i in states:
            gamma = alpha[t][i] * beta[t][i]
            gamma_totals[i] += gamma
            emitted[i][c] += gamma
            if t < n - 1:
                leaving_totals[i] += gamma
        if t < n - 1:
            nxt = sequence[t + 1]
            for i in states:
                for j in states:
                    xi_totals[i][j] += (
                        alpha[t][i]
                        * params.transitions[i][j]
                        * params.emissions[j][nxt]
                        * beta[t + 1][j]
                        / scales[t + 1]
                    )

    start = [alpha[0][i] * beta[0][i] for i in states]
    transitions = []
    for i in states:
        if leaving_totals[i] > 0:
            transitions.append([xi_totals[i][j] / leaving_totals[i] for j in states])
        else:
            transitions.append(list(params.transitions[i]))
    emissions = []
    for i in states:
        if gamma_totals[i] > 0:
            emissions.append({b: emitted[i][b] / gamma_totals[i] for b in BASES})
        else:
            emissions.append(dict(params.emissions[i]))

    updated = HMMParameters(start=start, transitions=transitions, emissions=emissions)
    return log_likelihood(scales), updated


def train(
    sequence: str,
    params: HMMParameters | None = None,
    tolerance: float = TOLERANCE,
    max_iterations: int = MAX_ITERATIONS,
) -> TrainingResult:
    """Run Baum-Welch until the log-likelihood settles.

    The reported parameters are the ones the final log-likelihood was
    computed under.
    """
    if not sequence:
        raise ExerciseError("Cannot train on an empty sequence")
    params = params or HMMParameters()

    iterations = 0
    previous: float | None = None
    while True:
        iterations += 1
        current, updated = reestimate(sequence, params)
        logger.debug("baum_welch_iteration", iteration=iterations, log_likelihood=current)
        if previous is not None and abs(current - previous) <= tolerance:
            break
        if iterations >= max_iterations:
            logger.warning("baum_welch_not_converged", iterations=iterations)
            break
        params = updated
        previous = current

    return TrainingResult(iterations=iterations, log_likelihood=current, parameters=params)


def run(inputs: list[Path], context: ExerciseContext) -> list[str]:
    genome = load_fasta(inputs[0], alphabet=BASES)
    tolerance = context.setting("tolerance", TOLERANCE, float)
    max_iterations = context.setting("max_iterations", MAX_ITERATIONS, int)

    result = train(genome.sequence, tolerance=tolerance, max_iterations=max_iterations)
    params = result.parameters

    lines = [f"Fasta: {genome.file_name}", genome.header]
    lines.extend(["", "Iterations for Convergence:", str(result.iterations)])
    lines.extend(["", "Log Likelihood:", f"{result.log_likelihood:.3f}"])

    lines.extend(["", "Initial State Probabilities:"])
    lines.extend(f"{i + 1}={p:.3e}" for i, p in enumerate(params.start))

    lines.extend(["", "Transition Probabilities:"])
    for i in params.states:
        lines.extend(
            f"{i + 1},{j + 1}={params.transitions[i][j]:.3e}" for j in params.states
        )

    lines.extend(["", "Emission Probabilities:"])
    for i in params.states:
        lines.extend(f"{i + 1},{b}={params.emissions[i][b]:.3e}" for b in BASES)
    return lines
