from qrunner import build, run
from qrunner.display import format_counts, render_circuit
from qrunner.gates import H, X

# One qubit in equal superposition
circuit = build(1, [H(0)])
print(render_circuit(circuit))
result = run(circuit, 1024)
print(format_counts(result))

# Flip first, then superpose: a different state, the same statistics
circuit = build(1, [X(0), H(0)])
print(render_circuit(circuit))
result = run(circuit, 1024)
print(format_counts(result))
