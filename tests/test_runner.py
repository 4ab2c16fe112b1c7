import math
import unittest

import numpy as np
import torch

from qrunner.config import RunnerConfig
from qrunner.errors import InvalidCircuit, InvalidShots
from qrunner.gates import H, I, X
from qrunner.runner import CircuitRunner, _batch_sizes


def _runner(**kwargs) -> CircuitRunner:
    return CircuitRunner(device="cpu", config=RunnerConfig(), **kwargs)


class CircuitRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.runner = _runner()

    def test_no_gates_measures_all_zero(self) -> None:
        for n in (1, 2, 4):
            circuit = self.runner.build(n, [])
            result = self.runner.run(circuit, 500, seed=n)
            self.assertEqual(dict(result), {"0" * n: 500})

    def test_bit_flip_is_deterministic(self) -> None:
        result = self.runner.run(self.runner.build(3, [X(1)]), 200, seed=0)
        self.assertEqual(dict(result), {"010": 200})

    def test_identity_gate(self) -> None:
        result = self.runner.run(self.runner.build(1, [I(0)]), 100, seed=0)
        self.assertEqual(result["0"], 100)

    def test_single_superposition_is_balanced(self) -> None:
        shots = 10_000
        bound = 5 * math.sqrt(shots) / 2
        circuit = self.runner.build(1, [H(0)])
        for seed in range(20):
            result = self.runner.run(circuit, shots, seed=seed)
            self.assertLessEqual(abs(result.get("0", 0) - shots / 2), bound)
            self.assertLessEqual(abs(result.get("1", 0) - shots / 2), bound)

    def test_counts_sum_to_shots(self) -> None:
        circuits = [
            self.runner.build(1, [H(0)]),
            self.runner.build(2, [H(0), X(1)]),
            self.runner.build(3, [H(0), H(1), H(2), X(0)]),
        ]
        for circuit in circuits:
            for shots in (1, 7, 1000, 12_345):
                result = self.runner.run(circuit, shots, seed=shots)
                self.assertEqual(sum(result.values()), shots)
                self.assertEqual(result.shots, shots)

    def test_flip_then_superposition_matches_superposition(self) -> None:
        plain = self.runner.build(1, [H(0)])
        flipped = self.runner.build(1, [X(0), H(0)])

        # Different states...
        self.assertFalse(torch.allclose(
            self.runner.evolve(plain).state_vector,
            self.runner.evolve(flipped).state_vector,
        ))
        # ...with identical measurement statistics
        self.assertTrue(torch.allclose(
            self.runner.evolve(plain).get_distribution(),
            self.runner.evolve(flipped).get_distribution(),
        ))
        self.assertEqual(
            dict(self.runner.run(plain, 4000, seed=11)),
            dict(self.runner.run(flipped, 4000, seed=11)),
        )

    def test_uniform_superposition(self) -> None:
        n = 3
        shots = 80_000
        p = 1 / 2 ** n
        bound = 5 * math.sqrt(shots * p * (1 - p))
        circuit = self.runner.build(n, [H(q) for q in range(n)])
        result = self.runner.run(circuit, shots, seed=5)
        self.assertEqual(len(result), 2 ** n)
        for outcome in result:
            self.assertLessEqual(abs(result[outcome] - shots * p), bound, outcome)

    def test_out_of_range_qubit(self) -> None:
        with self.assertRaises(InvalidCircuit):
            self.runner.build(2, [H(2)])

    def test_invalid_shots(self) -> None:
        circuit = self.runner.build(1, [H(0)])
        for shots in (0, -5):
            with self.assertRaises(InvalidShots):
                self.runner.run(circuit, shots)
        with self.assertRaises(InvalidShots):
            self.runner.run(circuit, 10.0)  # type: ignore[arg-type]
        with self.assertRaises(InvalidShots):
            self.runner.run(circuit, True)

    def test_invalid_shots_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            self.runner.run(self.runner.build(1, []), 0)

    def test_numpy_integer_shots(self) -> None:
        result = self.runner.run(self.runner.build(1, []), np.int64(10), seed=1)
        self.assertEqual(result["0"], 10)

    def test_same_seed_same_counts(self) -> None:
        circuit = self.runner.build(2, [H(0), H(1)])
        self.assertEqual(
            dict(self.runner.run(circuit, 3000, seed=42)),
            dict(self.runner.run(circuit, 3000, seed=42)),
        )

    def test_unseeded_run_records_replayable_seed(self) -> None:
        circuit = self.runner.build(2, [H(0), H(1)])
        first = self.runner.run(circuit, 3000)
        self.assertIsNotNone(first.seed)
        replay = self.runner.run(circuit, 3000, seed=first.seed)
        self.assertEqual(dict(first), dict(replay))
        self.assertEqual(replay.seed, first.seed)

    def test_batching_preserves_totals(self) -> None:
        circuit = self.runner.build(2, [H(0), H(1)])
        for batch_size in (1, 3, 64, 10_000):
            runner = _runner(batch_size=batch_size)
            result = runner.run(circuit, 1000, seed=9)
            self.assertEqual(sum(result.values()), 1000)
            self.assertEqual(set(result) <= {"00", "01", "10", "11"}, True)

    def test_batch_sizes(self) -> None:
        self.assertEqual(_batch_sizes(10, 4), [4, 4, 2])
        self.assertEqual(_batch_sizes(8, 4), [4, 4])
        self.assertEqual(_batch_sizes(3, 100), [3])

    def test_settings_from_config(self) -> None:
        runner = CircuitRunner(config=RunnerConfig(device="cpu", batch_size=7, max_qubits=3))
        self.assertEqual(runner.device.type, "cpu")
        self.assertEqual(runner.batch_size, 7)
        with self.assertRaises(InvalidCircuit):
            runner.build(4, [])

    def test_non_positive_batch_size_rejected(self) -> None:
        with self.assertRaises(ValueError):
            _runner(batch_size=0)

    def test_invalid_seed(self) -> None:
        circuit = self.runner.build(1, [H(0)])
        with self.assertRaisesRegex(ValueError, "Seed must be non-negative"):
            self.runner.run(circuit, 10, seed=-1)
        with self.assertRaisesRegex(ValueError, "Seed must be an int"):
            self.runner.run(circuit, 10, seed=1.5)  # type: ignore[arg-type]

    def test_numpy_integer_seed(self) -> None:
        circuit = self.runner.build(2, [H(0), H(1)])
        self.assertEqual(
            dict(self.runner.run(circuit, 500, seed=np.int64(8))),
            dict(self.runner.run(circuit, 500, seed=8)),
        )


class ModuleLevelTests(unittest.TestCase):
    def test_build_and_run(self) -> None:
        import qrunner

        circuit = qrunner.build(1, [qrunner.gates.X(0)])
        result = qrunner.run(circuit, 25, seed=1)
        self.assertEqual(dict(result), {"1": 25})


if __name__ == "__main__":
    unittest.main()
