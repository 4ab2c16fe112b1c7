"""Named one- and two-qubit experiments from the superposition tutorial."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from qrunner.gates import H, I, X
from qrunner.system import Circuit, build_circuit


@dataclass(frozen=True)
class Experiment:
    name: str
    description: str
    circuit: Circuit
    expected: dict[str, float]
    tolerance: float | None = None


def baseline() -> Experiment:
    return Experiment(
        name="baseline",
        description="One qubit, no gates: always measures 0.",
        circuit=build_circuit(1, []),
        expected={"0": 1.0},
    )


def identity() -> Experiment:
    return Experiment(
        name="identity",
        description="Identity gate leaves |0⟩ untouched.",
        circuit=build_circuit(1, [I(0)]),
        expected={"0": 1.0},
    )


def bit_flip() -> Experiment:
    return Experiment(
        name="bit_flip",
        description="X flips |0⟩ to |1⟩ deterministically.",
        circuit=build_circuit(1, [X(0)]),
        expected={"1": 1.0},
    )


def superposition() -> Experiment:
    return Experiment(
        name="superposition",
        description="Hadamard puts one qubit into an equal superposition.",
        circuit=build_circuit(1, [H(0)]),
        expected={"0": 0.5, "1": 0.5},
    )


def flip_then_superposition() -> Experiment:
    # H|1⟩ = |−⟩ differs from H|0⟩ = |+⟩ only by a relative phase
    return Experiment(
        name="flip_then_superposition",
        description="X then H: same 50/50 statistics as H alone, different state.",
        circuit=build_circuit(1, [X(0), H(0)]),
        expected={"0": 0.5, "1": 0.5},
    )


def two_qubit_superposition() -> Experiment:
    return Experiment(
        name="two_qubit_superposition",
        description="Hadamard on both qubits: four equally likely outcomes.",
        circuit=build_circuit(2, [H(0), H(1)]),
        expected={"00": 0.25, "01": 0.25, "10": 0.25, "11": 0.25},
    )


def superposition_and_flip() -> Experiment:
    return Experiment(
        name="superposition_and_flip",
        description="Hadamard on qubit 0, X on qubit 1.",
        circuit=build_circuit(2, [H(0), X(1)]),
        expected={"01": 0.5, "11": 0.5},
    )


def uniform_superposition(n_qubits: int = 3) -> Experiment:
    width = 1 << n_qubits
    return Experiment(
        name="uniform_superposition",
        description=f"Hadamard on each of {n_qubits} qubits: {width} equally likely outcomes.",
        circuit=build_circuit(n_qubits, [H(q) for q in range(n_qubits)]),
        expected={format(i, f"0{n_qubits}b"): 1 / width for i in range(width)},
    )


ALL_EXPERIMENTS: list[Callable[[], Experiment]] = [
    baseline,
    identity,
    bit_flip,
    superposition,
    flip_then_superposition,
    two_qubit_superposition,
    superposition_and_flip,
    uniform_superposition,
]


def experiment_names() -> list[str]:
    return [experiment_fn.__name__ for experiment_fn in ALL_EXPERIMENTS]


def get_experiment(name: str, *, n_qubits: int | None = None) -> Experiment:
    """Instantiate an experiment by name; ``n_qubits`` applies to ``uniform_superposition``."""
    registry = {experiment_fn.__name__: experiment_fn for experiment_fn in ALL_EXPERIMENTS}
    if name not in registry:
        raise KeyError(f"Unknown experiment {name!r} (known: {', '.join(registry)})")
    if name == "uniform_superposition" and n_qubits is not None:
        return uniform_superposition(n_qubits)
    return registry[name]()
