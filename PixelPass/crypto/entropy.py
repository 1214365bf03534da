# entropy.py
# Image -> 64x64 binary bitmap -> SHA-256 digest, plus XOR combination of many digests
from __future__ import annotations
import hashlib, logging
from dataclasses import dataclass
from functools import reduce
from typing import Sequence, Union
import numpy as np

from .errors import EmptyInput, LengthMismatch, NoInputs

logger = logging.getLogger(__name__)

TARGET_SIZE = 64
CHANNELS = 4
THRESHOLD = 3 * 128
DIGEST_SIZE = hashlib.sha256().digest_size

@dataclass(frozen=True)
class PixelBuffer:
    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative image size {self.width}x{self.height}")
        need = self.width * self.height * CHANNELS
        if len(self.pixels) < need:
            raise ValueError(f"pixel buffer holds {len(self.pixels)} bytes, {need} needed")

    def as_array(self) -> np.ndarray:
        n = self.width * self.height * CHANNELS
        return np.frombuffer(self.pixels, dtype=np.uint8, count=n).reshape(self.height, self.width, CHANNELS)

def normalize(buffer: PixelBuffer, size: int = TARGET_SIZE) -> np.ndarray:
    """
    Nearest-neighbour rescale to size x size and binarize on RGB brightness.

    A cell is 1 when R+G+B > 384, otherwise 0. Alpha is ignored. An empty
    image gives an all-zero matrix.
    """
    W, H = buffer.width, buffer.height
    out = np.zeros((size, size), dtype=np.uint8)
    if W and H:
        src_x = (np.arange(size) * W) // size
        src_y = (np.arange(size) * H) // size
        inside_x = src_x < W
        inside_y = src_y < H
        # sample the 64x64 grid before converting, only those pixels are read
        rgb = buffer.as_array()[np.ix_(src_y[inside_y], src_x[inside_x])][..., :3].astype(np.uint32)
        brightness = rgb.sum(axis=2)
        out[np.ix_(inside_y, inside_x)] = (brightness > THRESHOLD).astype(np.uint8)
    out.setflags(write=False)
    return out

def bitmap_stats(matrix: np.ndarray) -> dict:
    total = int(matrix.size)
    ones = int(np.count_nonzero(matrix))
    frac = ones / total if total else 0.0
    if 0.30 < frac < 0.70:
        rating = "excellent"
    elif 0.15 < frac < 0.85:
        rating = "very good"
    else:
        rating = "acceptable"
    return {"cells": total, "active": ones, "inactive": total - ones, "active_fraction": frac, "rating": rating}

def hash_bytes(data: Union[bytes, bytearray, memoryview, np.ndarray]) -> bytes:
    if isinstance(data, np.ndarray):
        data = np.ascontiguousarray(data, dtype=np.uint8).tobytes()
    return hashlib.sha256(bytes(data)).digest()

def combine(digests: Sequence[bytes]) -> bytes:
    if len(digests) == 0:
        raise EmptyInput("cannot combine an empty list of digests")
    n = len(digests[0])
    for i, d in enumerate(digests):
        if len(d) != n:
            raise LengthMismatch(n, len(d), i)
    arrays = [np.frombuffer(d, dtype=np.uint8) for d in digests]
    return reduce(np.bitwise_xor, arrays[1:], arrays[0].copy()).tobytes()

def finalize(combined: bytes) -> bytes:
    return hash_bytes(combined)

def extract_entropy(bitmaps: Sequence[np.ndarray]) -> bytes:
    """Hash every bitmap, XOR the digests together and re-hash the result."""
    if len(bitmaps) == 0:
        raise NoInputs("at least one image is required")
    digests = []
    for i, bm in enumerate(bitmaps):
        d = hash_bytes(bm)
        logger.debug("bitmap %d digest %s", i, d.hex())
        digests.append(d)
    root = finalize(combine(digests))
    logger.debug("root digest over %d bitmap(s): %s", len(digests), root.hex())
    return root
