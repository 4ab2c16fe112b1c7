"""Quantum system state management."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Annotated, cast, override

import numpy as np
import numpy.typing as npt
import torch

from qrunner.errors import InvalidCircuit
from qrunner.gates import GateOp

__all__ = ["Circuit", "QuantumSystem", "build_circuit", "resolve_device"]

DEFAULT_MAX_QUBITS = 20


@dataclass(frozen=True)
class Circuit:
    """An ordered gate sequence on ``n_qubits`` qubits.

    Every qubit is measured into the classical bit of the same index once
    all gates have been applied, so ``n_bits == n_qubits``.
    """

    n_qubits: int
    operations: tuple[GateOp, ...] = ()

    def __post_init__(self):
        if isinstance(self.n_qubits, bool) or not isinstance(self.n_qubits, int):
            raise InvalidCircuit(f"Number of qubits must be an int, got {self.n_qubits!r}")
        if self.n_qubits <= 0:
            raise InvalidCircuit(f"Number of qubits must be positive, got {self.n_qubits}")

        operations = tuple(self.operations)
        for position, op in enumerate(operations):
            if not isinstance(op, GateOp):
                raise InvalidCircuit(f"Operation {position} is not a GateOp: {op!r}")
            if op.qubit >= self.n_qubits:
                raise InvalidCircuit(
                    f"Operation {position} ({op}) targets qubit {op.qubit}, register has {self.n_qubits} qubits"
                )
        # frozen; bypass __setattr__
        object.__setattr__(self, "operations", operations)

    @property
    def n_bits(self) -> int:
        return self.n_qubits

    @property
    def depth(self) -> int:
        per_qubit = Counter(op.qubit for op in self.operations)
        return max(per_qubit.values(), default=0)

    def count_ops(self) -> dict[str, int]:
        return dict(Counter(op.name for op in self.operations))

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[GateOp]:
        return iter(self.operations)

    @override
    def __str__(self) -> str:
        gates = ", ".join(str(op) for op in self.operations)
        return f"Circuit({self.n_qubits} qubits: [{gates}])"


def build_circuit(n_qubits: int, ops: Iterable[GateOp], *, max_qubits: int = DEFAULT_MAX_QUBITS) -> Circuit:
    """Freeze ``ops`` into a Circuit on ``n_qubits`` qubits, enforcing the register width limit."""
    circuit = Circuit(n_qubits, tuple(ops))
    if circuit.n_qubits > max_qubits:
        raise InvalidCircuit(f"Number of qubits ({n_qubits}) exceeds the limit of {max_qubits}")
    return circuit


def resolve_device(device: torch.device | str | None = None) -> torch.device:
    if device is not None:
        try:
            return torch.device(device)
        except (RuntimeError, TypeError):
            raise ValueError(f"Unknown torch device {device!r}") from None
    return torch.device(
        "cuda" if torch.cuda.is_available() else
        "mps"  if torch.backends.mps.is_available() else
        "cpu"
    )


class QuantumSystem:
    """State vector of an ``n_qubits`` register, evolved one gate at a time.

    Big-endian convention: qubit 0 is the most significant bit of a basis
    index, so it is the leftmost character of an outcome bitstring.
    """
    state_vector: Annotated[torch.Tensor, "(2^n_qubits,) complex64"]
    n_qubits: int
    dimensions: int
    device: torch.device

    def __init__(self, n_qubits: int, device: torch.device | str | None = None):
        self.n_qubits = n_qubits
        self.dimensions = 1 << n_qubits
        self.device = resolve_device(device)

        # |000...0⟩
        self.state_vector = torch.zeros(self.dimensions, dtype=torch.complex64, device=self.device)
        self.state_vector[0] = 1.0

    @torch.inference_mode()
    def apply_gate(self, op: GateOp) -> QuantumSystem:
        """Apply a single-qubit gate: |ψ⟩ → (I ⊗ … ⊗ G ⊗ … ⊗ I) |ψ⟩

        The state is viewed as an n-axis tensor with one length-2 axis per
        qubit; contracting the gate with the target axis avoids building
        the full 2^n × 2^n operator.
        """
        if not 0 <= op.qubit < self.n_qubits:
            raise InvalidCircuit(f"Qubit {op.qubit} is outside a {self.n_qubits}-qubit register")

        tensor = op.tensor.to(self.device)
        psi = self.state_vector.reshape([2] * self.n_qubits)
        # tensordot puts the gate's output axis first; move it back to the target position
        psi = torch.tensordot(tensor, psi, dims=([1], [op.qubit]))
        psi = torch.movedim(psi, 0, op.qubit)
        self.state_vector = psi.reshape(self.dimensions)

        # Renormalise
        norm = torch.sqrt(torch.sum(torch.abs(self.state_vector) ** 2))
        self.state_vector = self.state_vector / norm
        return self

    def apply_circuit(self, circuit: Circuit) -> QuantumSystem:
        if circuit.n_qubits != self.n_qubits:
            raise InvalidCircuit(
                f"Circuit has {circuit.n_qubits} qubits, system has {self.n_qubits}"
            )
        for op in circuit.operations:
            _ = self.apply_gate(op)
        return self

    def get_distribution(self) -> torch.Tensor:
        """Born-rule probabilities of every basis state, as float64 on the CPU."""
        probs = torch.abs(self.state_vector) ** 2
        return probs.to(device="cpu", dtype=torch.float64)

    def sample(self, num_shots: int, generator: torch.Generator | None = None) -> torch.Tensor:
        """Draw ``num_shots`` basis indices from the Born-rule distribution."""
        distribution = self.get_distribution()
        return torch.multinomial(distribution, num_shots, replacement=True, generator=generator)

    def format_basis(self, index: int) -> str:
        return format(index, f"0{self.n_qubits}b")

    @override
    def __repr__(self) -> str:
        """Pretty print the quantum state in basis notation."""
        vec: npt.NDArray[np.complex64] = self.state_vector.cpu().numpy()
        terms: list[str] = []

        number_of_decimals = 4

        for i in range(len(vec)):
            val = cast(np.complex64, vec[i])
            real = float(np.real(val))
            imag = float(np.imag(val))

            # Skip negligible amplitudes
            if float(np.abs(val)) < 1e-10:
                continue

            if abs(imag) < 1e-10:
                coef = f"{real:.{number_of_decimals}f}"
            elif abs(real) < 1e-10:
                coef = f"{imag:.{number_of_decimals}f}i"
            else:
                sign = "+" if imag >= 0 else "-"
                coef = f"({real:.{number_of_decimals}f} {sign} {abs(imag):.{number_of_decimals}f}i)"

            terms.append(f"{coef}|{self.format_basis(i)}⟩")

        if not terms:
            return "|ψ⟩ = 0"

        result = "|ψ⟩ = "
        for i, term in enumerate(terms):
            if i == 0:
                result += term
            elif term.startswith("-"):
                result += f" - {term[1:]}"
            else:
                result += f" + {term}"
        return result
