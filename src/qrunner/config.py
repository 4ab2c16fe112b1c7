"""Runner settings read from ``QRUNNER_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from qrunner.system import DEFAULT_MAX_QUBITS

DEFAULT_SHOTS = 1024
DEFAULT_BATCH_SIZE = 100_000


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class RunnerConfig:
    device: str | None = None
    batch_size: int = DEFAULT_BATCH_SIZE
    max_qubits: int = DEFAULT_MAX_QUBITS
    shots: int = DEFAULT_SHOTS

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> RunnerConfig:
        if env is None:
            env = os.environ
        device = env.get("QRUNNER_DEVICE") or None
        return cls(
            device=device,
            batch_size=_positive_int(env, "QRUNNER_BATCH_SIZE", DEFAULT_BATCH_SIZE),
            max_qubits=_positive_int(env, "QRUNNER_MAX_QUBITS", DEFAULT_MAX_QUBITS),
            shots=_positive_int(env, "QRUNNER_SHOTS", DEFAULT_SHOTS),
        )
