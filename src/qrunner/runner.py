"""Build circuits and sample their measurement outcomes."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import torch

from qrunner.config import RunnerConfig
from qrunner.errors import InvalidShots
from qrunner.gates import GateOp
from qrunner.results import RunResult
from qrunner.system import Circuit, QuantumSystem, build_circuit, resolve_device


def _check_shots(shots: int) -> None:
    if isinstance(shots, bool) or not isinstance(shots, (int, np.integer)):
        raise InvalidShots(f"Shots must be an int, got {shots!r}")
    if shots <= 0:
        raise InvalidShots(f"Shots must be positive, got {shots}")


def _check_seed(seed: int | None) -> None:
    if seed is None:
        return
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise ValueError(f"Seed must be an int, got {seed!r}")
    if seed < 0:
        raise ValueError(f"Seed must be non-negative, got {seed}")


def _batch_sizes(shots: int, batch_size: int) -> list[int]:
    full, rest = divmod(shots, batch_size)
    return [batch_size] * full + ([rest] if rest else [])


class CircuitRunner:
    """Statevector simulator with Born-rule sampling.

    Holds only immutable settings; every call to ``run`` starts from
    ``|0...0⟩`` and draws from generators seeded for that call alone.
    """
    device: torch.device
    batch_size: int
    max_qubits: int

    def __init__(
        self,
        *,
        device: torch.device | str | None = None,
        batch_size: int | None = None,
        max_qubits: int | None = None,
        config: RunnerConfig | None = None,
    ):
        if config is None:
            config = RunnerConfig.from_env()
        self.device = resolve_device(device if device is not None else config.device)
        self.batch_size = batch_size if batch_size is not None else config.batch_size
        self.max_qubits = max_qubits if max_qubits is not None else config.max_qubits
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    def build(self, n_qubits: int, ops: Iterable[GateOp]) -> Circuit:
        return build_circuit(n_qubits, ops, max_qubits=self.max_qubits)

    def evolve(self, circuit: Circuit) -> QuantumSystem:
        """Return the pre-measurement state of ``circuit``."""
        return QuantumSystem(circuit.n_qubits, device=self.device).apply_circuit(circuit)

    def run(self, circuit: Circuit, shots: int, seed: int | None = None) -> RunResult:
        """Simulate ``circuit`` and measure every qubit ``shots`` times.

        Shots are split into batches of at most ``batch_size``; each batch
        samples with its own generator spawned from ``SeedSequence(seed)``.
        With ``seed=None`` fresh entropy is drawn and stored on the result,
        so any run can be replayed.
        """
        _check_shots(shots)
        _check_seed(seed)
        shots = int(shots)

        system = self.evolve(circuit)

        seed_seq = np.random.SeedSequence(None if seed is None else int(seed))
        sizes = _batch_sizes(shots, self.batch_size)
        histogram = np.zeros(system.dimensions, dtype=np.int64)

        for size, child in zip(sizes, seed_seq.spawn(len(sizes))):
            generator = torch.Generator(device="cpu")
            _ = generator.manual_seed(int(child.generate_state(1, dtype=np.uint64)[0] >> np.uint64(1)))
            samples = system.sample(size, generator)
            histogram += torch.bincount(samples, minlength=system.dimensions).numpy()

        return RunResult.from_histogram(histogram, n_qubits=circuit.n_qubits, seed=int(seed_seq.entropy))


_default_runner: CircuitRunner | None = None


def default_runner() -> CircuitRunner:
    global _default_runner
    if _default_runner is None:
        _default_runner = CircuitRunner()
    return _default_runner


def build(n_qubits: int, ops: Iterable[GateOp]) -> Circuit:
    return default_runner().build(n_qubits, ops)


def run(circuit: Circuit, shots: int, seed: int | None = None) -> RunResult:
    return default_runner().run(circuit, shots, seed=seed)
