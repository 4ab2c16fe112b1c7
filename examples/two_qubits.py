from rich import print

from qrunner import CircuitRunner
from qrunner.display import counts_table, render_circuit, state_table
from qrunner.gates import H

runner = CircuitRunner()
circuit = runner.build(2, [H(0), H(1)])
print(render_circuit(circuit))
print(state_table(runner.evolve(circuit)))

result = runner.run(circuit, 4096, seed=2024)
print(counts_table(result, title=f"{result.shots} shots, seed {result.seed}"))
