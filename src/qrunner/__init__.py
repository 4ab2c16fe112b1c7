from qrunner.errors import QRunnerError, InvalidCircuit, InvalidShots
from qrunner import gates
from qrunner.gates import GateKind, GateOp
from qrunner.system import Circuit, QuantumSystem
from qrunner.results import RunResult
from qrunner.runner import CircuitRunner, build, run

__version__ = "0.1.0"
__all__ = [
    "CircuitRunner",
    "Circuit",
    "GateKind",
    "GateOp",
    "InvalidCircuit",
    "InvalidShots",
    "QRunnerError",
    "QuantumSystem",
    "RunResult",
    "build",
    "gates",
    "run",
]
