# stream.py
# Deterministic index stream seeded from digest bytes (or from the OS, on request)
from __future__ import annotations
import os, logging
from dataclasses import dataclass, field
from typing import Union
import numpy as np

logger = logging.getLogger(__name__)

SEED_BYTES = 8

def seed_int_from_material(material: bytes) -> int:
    head = bytes(material[:SEED_BYTES])
    head = head + b"\x00" * (SEED_BYTES - len(head))
    return int.from_bytes(head, "little")

@dataclass(frozen=True)
class DeterministicSeed:
    material: bytes

    def seed_int(self) -> int:
        return seed_int_from_material(self.material)

@dataclass(frozen=True)
class SystemRandomSeed:
    def seed_int(self) -> int:
        return seed_int_from_material(os.urandom(SEED_BYTES))

SeedSource = Union[DeterministicSeed, SystemRandomSeed]

def seed_source(seed: bytes, deterministic: bool = True) -> SeedSource:
    return DeterministicSeed(bytes(seed)) if deterministic else SystemRandomSeed()

@dataclass
class SeededStream:
    """
    Infinite stream of uniform indices backed by numpy's SFC64 bit generator
    (256-bit state). The seed integer is fixed when the stream is built, so
    restart() replays the same sequence even for a system-random source.
    """
    source: SeedSource
    seed: int = field(init=False)

    def __post_init__(self):
        self.seed = self.source.seed_int()
        self.restart()

    def restart(self) -> None:
        self._rng = np.random.Generator(np.random.SFC64(self.seed))

    def indices(self, n: int, size: int) -> np.ndarray:
        if n <= 0:
            raise ValueError(f"index range must be positive, got {n}")
        return self._rng.integers(0, n, size=size, dtype=np.int64)

    def index(self, n: int) -> int:
        return int(self.indices(n, 1)[0])
