import os
from typing import Iterable, List

from .entropy import PixelBuffer, normalize, extract_entropy
from .errors import EmptyAlphabet
from .password import CharacterSet, PasswordPolicy, derive_many, estimate_entropy_bits, synthesize

DEFAULT_LENGTH = int(os.getenv("PIXPASS_LENGTH", "16"))
DEFAULT_CHARS = os.getenv("PIXPASS_CHARS", "ulns")
DEFAULT_COUNT = int(os.getenv("PIXPASS_COUNT", "1"))
DEFAULT_LOG_LEVEL = os.getenv("PIXPASS_LOG_LEVEL", "WARNING")

CLASS_LETTERS = {"u": "uppercase", "l": "lowercase", "n": "numbers", "s": "symbols"}

def parse_character_set(chars: str) -> CharacterSet:
    """'ulns' style selector -> CharacterSet. Unknown letters are rejected."""
    flags = {name: False for name in CLASS_LETTERS.values()}
    for c in chars.strip():
        if c not in CLASS_LETTERS:
            raise ValueError(f"unknown character class {c!r} (use any of u, l, n, s)")
        flags[CLASS_LETTERS[c]] = True
    if not any(flags.values()):
        raise EmptyAlphabet("no character class selected")
    return CharacterSet(**flags)

def make_policy(length: int = DEFAULT_LENGTH, chars: str = DEFAULT_CHARS) -> PasswordPolicy:
    return PasswordPolicy(length=length, character_set=parse_character_set(chars))

def passwords_from_buffers(buffers: Iterable[PixelBuffer], policy: PasswordPolicy,
                           count: int = DEFAULT_COUNT, randomize: bool = False) -> dict:
    bitmaps = [normalize(b) for b in buffers]
    root = extract_entropy(bitmaps)
    deterministic = not randomize
    if count == 1:
        passwords: List[str] = [synthesize(root, policy, deterministic)]
    else:
        passwords = derive_many(root, policy, count, deterministic)

    return {
        "passwords": passwords,
        "length": policy.length,
        "entropy_bits": estimate_entropy_bits(policy),
        "images": len(bitmaps),
        "digest_hex": None if randomize else root.hex(),
        "bitmaps": bitmaps,
    }
