import io
import unittest

from rich.console import Console
from rich.table import Table

from qrunner.display import _render_probability_bar, counts_table, format_counts, render_circuit, state_table
from qrunner.gates import H, X
from qrunner.results import RunResult
from qrunner.system import QuantumSystem, build_circuit


def _render(table: Table) -> str:
    console = Console(file=io.StringIO(), width=100)
    console.print(table)
    return console.file.getvalue()


class DisplayTests(unittest.TestCase):
    def test_render_single_qubit(self) -> None:
        self.assertEqual(render_circuit(build_circuit(1, [H(0)])), "q0: ─H─M═ c0")

    def test_render_keeps_gate_order(self) -> None:
        drawing = render_circuit(build_circuit(2, [H(0), X(1), H(1)]))
        self.assertEqual(drawing.splitlines(), [
            "q0: ─H─────M═ c0",
            "q1: ───X─H─M═ c1",
        ])

    def test_render_pads_labels(self) -> None:
        lines = render_circuit(build_circuit(11, [])).splitlines()
        self.assertEqual(lines[0], "q0 : ─M═ c0")
        self.assertEqual(lines[10], "q10: ─M═ c10")

    def test_probability_bar(self) -> None:
        self.assertEqual(_render_probability_bar(1.0).plain, "█" * 12)
        self.assertEqual(_render_probability_bar(0.0).plain, " " * 12)
        self.assertEqual(_render_probability_bar(0.5).plain, "█" * 6 + " " * 6)

    def test_format_counts(self) -> None:
        result = RunResult({"1": 3, "0": 5}, shots=8, n_qubits=1)
        self.assertEqual(format_counts(result), "  0: 5\n  1: 3")

    def test_counts_table(self) -> None:
        result = RunResult({"00": 750, "11": 250}, shots=1000, n_qubits=2)
        table = counts_table(result, title="Counts")
        self.assertEqual(table.row_count, 2)
        text = _render(table)
        self.assertIn("0.7500", text)
        self.assertIn("250", text)

    def test_state_table(self) -> None:
        system = QuantumSystem(2, device="cpu").apply_gate(H(0))
        table = state_table(system)
        self.assertEqual(table.row_count, 4)
        self.assertIn("|10⟩", _render(table))


if __name__ == "__main__":
    unittest.main()
