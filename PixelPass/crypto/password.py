# password.py
# Character sets, password policies and password synthesis from a seed
from __future__ import annotations
import math, logging
from dataclasses import dataclass, field
from typing import List, Union

from .entropy import hash_bytes
from .errors import EmptyAlphabet, InvalidPolicy, PolicyUnsatisfiable
from .stream import SeededStream, SeedSource, DeterministicSeed, SystemRandomSeed, seed_source

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100
INDEX_BYTES = 8

UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
NUMBERS = "0123456789"
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

@dataclass(frozen=True)
class CharacterSet:
    uppercase: bool = True
    lowercase: bool = True
    numbers: bool = True
    symbols: bool = True

    def enabled_slices(self) -> List[str]:
        flags = (self.uppercase, self.lowercase, self.numbers, self.symbols)
        return [s for on, s in zip(flags, (UPPERCASE, LOWERCASE, NUMBERS, SYMBOLS)) if on]

    def alphabet(self) -> str:
        chars = "".join(self.enabled_slices())
        if not chars:
            raise EmptyAlphabet("enable at least one of uppercase, lowercase, numbers, symbols")
        return chars

@dataclass(frozen=True)
class PasswordPolicy:
    length: int = 12
    character_set: CharacterSet = field(default_factory=CharacterSet)

    def __post_init__(self):
        if isinstance(self.length, bool) or not isinstance(self.length, int) or self.length <= 0:
            raise InvalidPolicy(f"password length must be a positive integer, got {self.length!r}")

    @property
    def min_length(self) -> int:
        return self.length

    def validate(self, password: str) -> bool:
        """
        True when the password is long enough and holds at least one
        character of every enabled class. Disabled classes are not checked.
        """
        if len(password) < self.length:
            return False
        missing = [set(s) for s in self.character_set.enabled_slices()]
        if not missing:
            return True
        for ch in password:
            missing = [s for s in missing if ch not in s]
            if not missing:
                return True
        return False

def estimate_entropy_bits(policy: PasswordPolicy) -> float:
    return policy.length * math.log2(len(policy.character_set.alphabet()))

def synthesize(seed: Union[bytes, SeedSource], policy: PasswordPolicy, deterministic: bool = True) -> str:
    alphabet = policy.character_set.alphabet()
    source = seed if isinstance(seed, (DeterministicSeed, SystemRandomSeed)) else seed_source(seed, deterministic)
    stream = SeededStream(source)
    for attempt in range(1, MAX_ATTEMPTS + 1):
        candidate = "".join(alphabet[i] for i in stream.indices(len(alphabet), policy.length))
        if policy.validate(candidate):
            if attempt > 1:
                logger.debug("policy satisfied on attempt %d", attempt)
            return candidate
        logger.debug("candidate %d rejected by policy", attempt)
    raise PolicyUnsatisfiable(MAX_ATTEMPTS, policy.length)

def derive_many(seed: bytes, policy: PasswordPolicy, count: int, deterministic: bool = True) -> List[str]:
    """
    Derive `count` passwords from one root seed. Index i uses
    sha256(seed || le64(i)) as its seed, so every index lands on its own
    stream; collisions are possible in principle and not checked.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    out = []
    for i in range(count):
        modified = bytes(seed) + i.to_bytes(INDEX_BYTES, "little")
        out.append(synthesize(hash_bytes(modified), policy, deterministic))
    return out
