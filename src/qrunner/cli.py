"""Command line entry point: run a tutorial experiment or an ad hoc gate sequence.

Examples:
  qrunner --experiment superposition --shots 4096
  qrunner --experiment uniform_superposition --qubits 4 --check
  qrunner --gates "h0 x1" --qubits 2 --seed 7
  qrunner --list
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from rich import print
from rich.markup import escape

from qrunner.config import RunnerConfig
from qrunner.display import counts_table, render_circuit, state_table
from qrunner.errors import QRunnerError
from qrunner.experiments import ALL_EXPERIMENTS, Experiment, experiment_names, get_experiment
from qrunner.gates import parse_gates
from qrunner.results import check_distribution
from qrunner.runner import CircuitRunner
from qrunner.system import Circuit


def build_parser(config: RunnerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qrunner",
        description="Run small quantum circuits on a statevector simulator and print outcome counts.",
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-e",
        "--experiment",
        choices=experiment_names(),
        help="Which tutorial experiment to run (default: superposition).",
    )
    group.add_argument(
        "-g",
        "--gates",
        help='Gate sequence to run, e.g. "h0 x1" or "h(0), h(1)".',
    )
    group.add_argument(
        "--list",
        action="store_true",
        help="List the available experiments and exit.",
    )

    parser.add_argument(
        "-q",
        "--qubits",
        type=int,
        default=None,
        help="Register width for --gates and uniform_superposition.",
    )
    parser.add_argument(
        "-s",
        "--shots",
        type=int,
        default=config.shots,
        help=f"Number of shots (default: {config.shots}, or QRUNNER_SHOTS).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for reproducible sampling (default: fresh entropy).",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help=f"Max shots per sampling batch (default: {config.batch_size}).",
    )
    parser.add_argument(
        "--device",
        default=None,
        help="Torch device for state evolution (default: QRUNNER_DEVICE or auto).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Compare counts with the experiment's expected distribution; exit 1 on mismatch.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Also print the pre-measurement state")
    return parser


def _list_experiments() -> None:
    for experiment_fn in ALL_EXPERIMENTS:
        experiment = experiment_fn()
        print(f"  {experiment.name:<26} {escape(experiment.description)}")


def _resolve_circuit(
    args: argparse.Namespace,
    runner: CircuitRunner,
    parser: argparse.ArgumentParser,
) -> tuple[str, Circuit, Experiment | None]:
    if args.gates is not None:
        ops = parse_gates(args.gates)
        n_qubits = args.qubits
        if n_qubits is None:
            n_qubits = max((op.qubit for op in ops), default=0) + 1
        return "gates", runner.build(n_qubits, ops), None

    name = args.experiment or "superposition"
    if args.qubits is not None and name != "uniform_superposition":
        parser.error("--qubits only applies to --gates and uniform_superposition")
    if args.qubits is not None and not 0 < args.qubits <= runner.max_qubits:
        parser.error(f"--qubits must be between 1 and {runner.max_qubits}")
    experiment = get_experiment(name, n_qubits=args.qubits)
    return name, experiment.circuit, experiment


def main(argv: Sequence[str] | None = None) -> int:
    try:
        config = RunnerConfig.from_env()
    except ValueError as error:
        print(f"[red]Configuration error:[/red] {escape(str(error))}", file=sys.stderr)
        return 2

    parser = build_parser(config)
    args = parser.parse_args(argv)

    if args.list:
        _list_experiments()
        return 0

    if args.check and args.gates is not None:
        parser.error("--check needs an experiment with a known expected distribution")

    try:
        runner = CircuitRunner(device=args.device, batch_size=args.batch_size, config=config)
        label, circuit, experiment = _resolve_circuit(args, runner, parser)
        result = runner.run(circuit, args.shots, seed=args.seed)
    except (QRunnerError, ValueError) as error:
        parser.error(str(error))

    print(f"Backend: statevector | Device: {runner.device.type} | Shots: {result.shots} | Seed: {result.seed}")
    print(f"\n[bold]Running[/bold] {escape(label)}")
    if experiment is not None:
        print(f"  {escape(experiment.description)}")

    print("\nQuantum circuit:\n")
    print(escape(render_circuit(circuit)))

    if args.verbose:
        system = runner.evolve(circuit)
        print(f"\n{escape(repr(system))}")
        print(state_table(system))

    print()
    print(counts_table(result, title="Measurement counts"))

    if args.check and experiment is not None:
        ok, errors = check_distribution(result, experiment.expected, experiment.tolerance)
        if not ok:
            print(f"\n[red]FAILED[/red]: {escape(label)}")
            for error in errors:
                print(f"  {escape(error)}")
            return 1
        bound = "5σ" if experiment.tolerance is None else f"±{experiment.tolerance:.3f}"
        print(f"\n[green]OK[/green]: {escape(label)} within {bound} of expected")

    return 0


if __name__ == "__main__":
    sys.exit(main())
