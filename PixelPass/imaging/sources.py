# sources.py
# Image decoding, directory scanning and bitmap previews around the core
from __future__ import annotations
import os, io
from typing import List, Sequence, Union
import numpy as np
from PIL import Image

from ..crypto.entropy import PixelBuffer
from ..crypto.errors import NoInputs

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".bmp", ".gif")

def pixel_buffer_from_image(img: Image.Image) -> PixelBuffer:
    rgba = img.convert("RGBA")
    W, H = rgba.size
    return PixelBuffer(W, H, rgba.tobytes())

def load_pixel_buffer(source: Union[str, bytes]) -> PixelBuffer:
    """Decode a file path or raw encoded image bytes."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        with Image.open(source) as img:
            return pixel_buffer_from_image(img)
    except Image.DecompressionBombError as e:
        raise ValueError(f"image too large: {e}") from e

def is_supported_image(name: str) -> bool:
    return name.lower().endswith(IMAGE_EXTENSIONS)

def iter_image_paths(folder: str) -> List[str]:
    paths = [os.path.join(folder, n) for n in sorted(os.listdir(folder))
             if is_supported_image(n) and os.path.isfile(os.path.join(folder, n))]
    if not paths:
        raise NoInputs(f"no supported image files in {folder}")
    return paths

def bitmap_to_u8(matrix: np.ndarray, scale: int = 4) -> np.ndarray:
    img = (np.asarray(matrix, dtype=np.uint8) * 255).astype(np.uint8)
    if scale > 1:
        img = np.kron(img, np.ones((scale, scale), dtype=np.uint8))
    return img

def render_bitmap_ascii(matrix: np.ndarray, on: str = "#", off: str = ".", step: int = 2) -> str:
    rows = []
    for y in range(0, matrix.shape[0], step):
        rows.append("".join(on if matrix[y, x] else off for x in range(0, matrix.shape[1], step)))
    return "\n".join(rows)

def save_bitmaps_gif(bitmaps: Sequence[np.ndarray], path: str, fps: float = 2.0, scale: int = 4) -> None:

    import imageio.v2 as imageio
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    dur = 1.0 / max(fps, 0.1)
    with imageio.get_writer(path, mode="I", duration=dur, loop=0) as w:
        for bm in bitmaps:
            w.append_data(bitmap_to_u8(bm, scale))

def dump_bitmaps_png(bitmaps: Sequence[np.ndarray], folder: str, stem: str = "bitmap", scale: int = 4) -> List[str]:
    os.makedirs(folder, exist_ok=True)
    out = []
    for i, bm in enumerate(bitmaps):
        p = os.path.join(folder, f"{stem}_{i:03d}.png")
        Image.fromarray(bitmap_to_u8(bm, scale)).save(p)
        out.append(p)
    return out
