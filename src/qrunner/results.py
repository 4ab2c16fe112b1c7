"""Outcome-frequency tables produced by a simulation run."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import override

import numpy as np
import numpy.typing as npt


class RunResult(Mapping[str, int]):
    """Read-only mapping from measured bitstring to occurrence count.

    Only outcomes that were observed are keys. Character ``i`` of a
    bitstring is the measured value of qubit ``i``.
    """
    shots: int
    n_qubits: int
    seed: int | None

    def __init__(self, counts: Mapping[str, int], *, shots: int, n_qubits: int, seed: int | None = None):
        total = sum(counts.values())
        if total != shots:
            raise ValueError(f"Counts sum to {total}, expected {shots} shots")
        for outcome in counts:
            if len(outcome) != n_qubits:
                raise ValueError(f"Outcome {outcome!r} is not {n_qubits} bits wide")

        self._counts = MappingProxyType(dict(sorted(counts.items())))
        self.shots = shots
        self.n_qubits = n_qubits
        self.seed = seed

    @classmethod
    def from_histogram(
        cls,
        histogram: npt.NDArray[np.int64],
        *,
        n_qubits: int,
        seed: int | None = None,
    ) -> RunResult:
        """Build a result from per-basis-index counts (length ``2**n_qubits``)."""
        counts: dict[str, int] = {}
        for index in np.flatnonzero(histogram):
            counts[format(int(index), f"0{n_qubits}b")] = int(histogram[index])
        return cls(counts, shots=int(histogram.sum()), n_qubits=n_qubits, seed=seed)

    @property
    def counts(self) -> Mapping[str, int]:
        return self._counts

    def probabilities(self) -> dict[str, float]:
        return {outcome: count / self.shots for outcome, count in self._counts.items()}

    def marginal(self, qubit: int) -> dict[str, int]:
        """Counts of ``"0"`` and ``"1"`` for a single qubit, summed over the others."""
        if not 0 <= qubit < self.n_qubits:
            raise IndexError(f"Qubit {qubit} is outside a {self.n_qubits}-qubit result")
        marginal = {"0": 0, "1": 0}
        for outcome, count in self._counts.items():
            marginal[outcome[qubit]] += count
        return marginal

    def int_outcomes(self) -> dict[int, int]:
        return {int(outcome, 2): count for outcome, count in self._counts.items()}

    def most_frequent(self) -> str:
        return max(self._counts, key=lambda outcome: self._counts[outcome])

    @override
    def __getitem__(self, key: str) -> int:
        return self._counts[key]

    @override
    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    @override
    def __len__(self) -> int:
        return len(self._counts)

    @override
    def __repr__(self) -> str:
        return f"RunResult({dict(self._counts)!r}, shots={self.shots})"


def check_distribution(
    result: Mapping[str, int],
    expected: Mapping[str, float],
    tolerance: float | None = None,
    *,
    sigmas: float = 5.0,
) -> tuple[bool, list[str]]:
    """Compare observed frequencies against an expected distribution.

    With ``tolerance=None`` each outcome with expected probability ``p`` may
    deviate by ``sigmas * sqrt(p * (1 - p) / shots)``, so the allowance
    shrinks with ``p`` and outcomes expected never (or always) must match
    exactly. A float ``tolerance`` is an absolute bound on every frequency.
    """
    total = sum(result.values())
    if total == 0:
        return (False, ["no shots recorded"])
    observed = {k: v / total for k, v in result.items()}

    def allowed(p: float) -> float:
        if tolerance is not None:
            return tolerance
        return sigmas * math.sqrt(p * (1 - p) / total)

    errors: list[str] = []
    for outcome, expected_freq in expected.items():
        observed_freq = observed.get(outcome, 0.0)
        if abs(observed_freq - expected_freq) > allowed(expected_freq):
            errors.append(f'"{outcome}": expected {expected_freq:.4f}, got {observed_freq:.4f}')

    for outcome, freq in observed.items():
        if outcome not in expected and freq > allowed(0.0):
            errors.append(f'"{outcome}": unexpected, got {freq:.4f}')

    return (len(errors) == 0, errors)
