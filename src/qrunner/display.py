from rich.table import Table
from rich.text import Text

from qrunner.results import RunResult
from qrunner.system import Circuit, QuantumSystem


def render_circuit(circuit: Circuit) -> str:
    """Draw the circuit as one text wire per qubit, ending in a measurement.

    Gates are laid out in program order, one column per gate, so the
    drawing shows the exact sequence rather than a compressed schedule.
    """
    label_width = len(f"q{circuit.n_qubits - 1}")
    wires = [f"q{q}".ljust(label_width) + ": ─" for q in range(circuit.n_qubits)]

    for op in circuit.operations:
        for q in range(circuit.n_qubits):
            wires[q] += f"{op.name.upper()}─" if q == op.qubit else "──"

    return "\n".join(f"{wire}M═ c{q}" for q, wire in enumerate(wires))


def _render_probability_bar(probability: float, width: int = 12) -> Text:
    """Render a miniature bar proportional to the probability."""
    probability = max(0.0, min(1.0, probability))
    filled = int(probability * width)
    remainder = (probability * width) - filled

    partial_steps = ["", "▏", "▎", "▍", "▌", "▋", "▊", "▉"]
    partial_index = min(len(partial_steps) - 1, int(remainder * len(partial_steps)))
    bar = "█" * filled
    if partial_index and filled < width:
        bar += partial_steps[partial_index]

    if len(bar) < width:
        bar = bar.ljust(width)

    return Text(bar)


def counts_table(result: RunResult, title: str | None = None) -> Table:
    table = Table(show_header=True, title=title)
    table.add_column("Outcome", justify="left")
    table.add_column("Count", justify="right")
    table.add_column("Frequency", justify="right")
    table.add_column("Distribution", justify="left")

    for outcome, frequency in result.probabilities().items():
        table.add_row(outcome, str(result[outcome]), f"{frequency:.4f}", _render_probability_bar(frequency))

    return table


def state_table(system: QuantumSystem) -> Table:
    """Amplitudes and Born-rule probabilities of every basis state."""
    dist = system.get_distribution()

    table = Table(show_header=True)
    table.add_column("Basis", justify="left")
    table.add_column("Amplitude", justify="right")
    table.add_column("Probability", justify="right")
    table.add_column("Distribution", justify="left")

    for i in range(system.dimensions):
        amplitude = f"{system.state_vector[i].item():.4f}"
        probability_value = float(dist[i].item())
        table.add_row(
            f"|{system.format_basis(i)}⟩",
            amplitude,
            f"{probability_value:.4f}",
            _render_probability_bar(probability_value),
        )

    return table


def format_counts(result: RunResult) -> str:
    return "\n".join(f"  {bitstring}: {count}" for bitstring, count in sorted(result.items()))
