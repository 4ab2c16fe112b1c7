import re
import math
from dataclasses import dataclass
from enum import Enum

import torch

from qrunner.errors import InvalidCircuit

def _complex_matrix(data: list[list[complex | int | float]]) -> torch.Tensor:
    return torch.tensor(data, dtype=torch.complex64)


class GateKind(Enum):
    IDENTITY = "i"
    BIT_FLIP = "x"
    HADAMARD = "h"
    PAULI_Y = "y"
    PHASE_FLIP = "z"
    S = "s"
    T = "t"

    @property
    def tensor(self) -> torch.Tensor:
        return _MATRICES[self]

    @classmethod
    def from_name(cls, name: str) -> "GateKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise InvalidCircuit(f"Unknown gate {name!r} (known gates: {known})") from None


_MATRICES: dict[GateKind, torch.Tensor] = {
    GateKind.IDENTITY: _complex_matrix([[1, 0], [0, 1]]),
    GateKind.BIT_FLIP: _complex_matrix([[0, 1], [1, 0]]),
    GateKind.HADAMARD: _complex_matrix([[1, 1], [1, -1]]) / math.sqrt(2),
    GateKind.PAULI_Y: _complex_matrix([[0, -1j], [1j, 0]]),
    GateKind.PHASE_FLIP: _complex_matrix([[1, 0], [0, -1]]),
    GateKind.S: _complex_matrix([[1, 0], [0, 1j]]),
    GateKind.T: _complex_matrix([[1, 0], [0, (1 + 1j) / math.sqrt(2)]]),
}


@dataclass(frozen=True)
class GateOp:
    """A single-qubit gate applied to one qubit of the register."""

    kind: GateKind
    qubit: int

    def __post_init__(self):
        if not isinstance(self.kind, GateKind):
            raise InvalidCircuit(f"Gate kind must be a GateKind, got {self.kind!r}")
        if isinstance(self.qubit, bool) or not isinstance(self.qubit, int):
            raise InvalidCircuit(f"Qubit index must be an int, got {self.qubit!r}")
        if self.qubit < 0:
            raise InvalidCircuit(f"Qubit index must be non-negative, got {self.qubit}")

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def tensor(self) -> torch.Tensor:
        return self.kind.tensor

    def __str__(self) -> str:
        return f"{self.name}({self.qubit})"


class GateType:
    kind: GateKind

    def __init__(self, kind: GateKind):
        self.kind = kind

    def __call__(self, qubit: int) -> GateOp:
        return GateOp(self.kind, qubit)

    def __repr__(self) -> str:
        return f"GateType({self.kind.name})"


I = GateType(GateKind.IDENTITY)
X = GateType(GateKind.BIT_FLIP)
H = GateType(GateKind.HADAMARD)
Y = GateType(GateKind.PAULI_Y)
Z = GateType(GateKind.PHASE_FLIP)
S = GateType(GateKind.S)
T = GateType(GateKind.T)


_GATE_TOKEN = re.compile(r"^([a-zA-Z]+)\s*(?:\(\s*(\d+)\s*\)|\[\s*(\d+)\s*\]|(\d+))$")


def parse_gates(text: str) -> list[GateOp]:
    """Parse a gate sequence such as ``"h0 x1"`` or ``"h(0), x[1]"``.

    Tokens are separated by commas, semicolons or whitespace. Each token is a
    gate name followed by the qubit index, optionally in parentheses or
    brackets.
    """
    ops: list[GateOp] = []
    for raw in re.split(r"[,;]|\s+(?![\s\(\[\d])", text):
        token = raw.strip()
        if not token:
            continue
        match = _GATE_TOKEN.match(token)
        if match is None:
            raise InvalidCircuit(f"Cannot parse gate token {token!r}")
        name = match.group(1)
        index = next(group for group in match.groups()[1:] if group is not None)
        ops.append(GateOp(GateKind.from_name(name), int(index)))
    return ops
