import os, sys, hashlib, itertools, secrets, numpy as np, pytest
ROOT = os.path.dirname(os.path.dirname(__file__))
sys.path.insert(0, ROOT)

from PixelPass.crypto.entropy import (
    PixelBuffer, normalize, hash_bytes, combine, finalize, extract_entropy, DIGEST_SIZE,
)
from PixelPass.crypto.errors import EmptyInput, LengthMismatch, NoInputs

TRIALS = int(os.getenv("PIXPASS_TRIALS", "200"))

def hamming_bits(a: bytes, b: bytes) -> int:
    x = np.frombuffer(a, dtype=np.uint8) ^ np.frombuffer(b, dtype=np.uint8)
    return int(np.unpackbits(x).sum())

def random_bitmap(rng) -> np.ndarray:
    return rng.integers(0, 2, (64, 64), dtype=np.uint8)

def avalanche(trials=TRIALS, seed=1234):
    rng = np.random.default_rng(seed)
    fracs = []
    for _ in range(trials):
        a = random_bitmap(rng)
        b = a.copy()
        y, x = rng.integers(0, 64, 2)
        b[y, x] ^= 1
        da, db = extract_entropy([a]), extract_entropy([b])
        fracs.append(hamming_bits(da, db) / (DIGEST_SIZE * 8))
    return np.array(fracs, dtype=float)

def test_digest_is_32_bytes_sha256():
    m = np.zeros((64, 64), dtype=np.uint8)
    d = hash_bytes(m)
    assert len(d) == 32 == DIGEST_SIZE
    assert d == hashlib.sha256(b"\x00" * 4096).digest()

def test_black_image_scenario():
    m = normalize(PixelBuffer(2, 2, bytes((0, 0, 0, 255)) * 4))
    d = hash_bytes(m)
    assert d == hashlib.sha256(bytes(64 * 64)).digest()
    assert combine([d]) == d
    assert finalize(d) == hashlib.sha256(d).digest()
    assert extract_entropy([m]) == finalize(d)

def test_combine_is_xor():
    a, b = bytes([0b1010] * 4), bytes([0b0110] * 4)
    assert combine([a, b]) == bytes([0b1100] * 4)
    assert combine([a, a]) == bytes(4)

def test_combine_order_independent():
    ds = [secrets.token_bytes(32) for _ in range(4)]
    ref = combine(ds)
    for perm in itertools.permutations(ds):
        assert combine(list(perm)) == ref

def test_combine_does_not_mutate_inputs():
    a, b = bytearray(b"\x01" * 32), bytes(b"\x02" * 32)
    combine([bytes(a), b])
    assert a == bytearray(b"\x01" * 32)

def test_combine_empty_fails():
    with pytest.raises(EmptyInput):
        combine([])

def test_combine_length_mismatch_fails():
    with pytest.raises(LengthMismatch) as exc:
        combine([bytes(32), bytes(32), bytes(16)])
    assert exc.value.index == 2 and exc.value.expected == 32 and exc.value.got == 16

def test_extract_entropy_no_inputs():
    with pytest.raises(NoInputs):
        extract_entropy([])

def test_extract_entropy_multi_image_order_independent():
    rng = np.random.default_rng(5)
    maps = [random_bitmap(rng) for _ in range(3)]
    assert extract_entropy(maps) == extract_entropy([maps[2], maps[0], maps[1]])
    assert extract_entropy(maps) != extract_entropy(maps[:2])

def test_distinct_bitmaps_give_distinct_digests():
    rng = np.random.default_rng(9)
    ds = {hash_bytes(random_bitmap(rng)) for _ in range(20)}
    assert len(ds) == 20

def test_single_bit_avalanche():
    fracs = avalanche()
    assert 0.30 <= fracs.mean() <= 0.70
    assert 0.45 <= fracs.mean() <= 0.55

if __name__ == "__main__":
    fracs = avalanche()
    print(f"Avalanche (single bitmap bit flip): mean={fracs.mean():.4f}, std={fracs.std():.4f}, trials={len(fracs)}")
