# pixelpass_cli.py
# Derive reproducible passwords from the pixels of one or more images
from __future__ import annotations
import argparse, logging, sys
from typing import List, Optional

from PixelPass.crypto.entropy import bitmap_stats
from PixelPass.crypto.errors import PixelPassError
from PixelPass.crypto.password_helpers import (
    DEFAULT_CHARS, DEFAULT_COUNT, DEFAULT_LENGTH, DEFAULT_LOG_LEVEL, make_policy, passwords_from_buffers,
)
from PixelPass.imaging.sources import (
    dump_bitmaps_png, iter_image_paths, load_pixel_buffer, render_bitmap_ascii, save_bitmaps_gif,
)

log = logging.getLogger("pixelpass")

def collect_paths(images: List[str], folder: Optional[str]) -> List[str]:
    paths = list(images or [])
    if folder:
        print(f"[pixelpass] scanning directory: {folder}")
        paths.extend(iter_image_paths(folder))
    return paths

def report_bitmap(path: str, bitmap, show_bitmap: bool) -> None:
    st = bitmap_stats(bitmap)
    print(f"[pixelpass] {path}: active bits {st['active']}/{st['cells']} "
          f"({st['active_fraction'] * 100:.2f}%), entropy rating: {st['rating']}")
    if show_bitmap:
        print(render_bitmap_ascii(bitmap))

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate passwords from image pixel entropy")
    p.add_argument("--image", "-s", action="append", default=[], help="Image file (repeatable)")
    p.add_argument("--dir", "-d", default=None, help="Use every supported image in this directory")
    p.add_argument("--length", "-l", type=int, default=DEFAULT_LENGTH, help=f"Password length (default {DEFAULT_LENGTH})")
    p.add_argument("--chars", "-c", default=DEFAULT_CHARS,
                   help="Character classes: u=upper, l=lower, n=numbers, s=symbols (default %(default)s)")
    p.add_argument("--count", "-n", type=int, default=DEFAULT_COUNT, help="Number of passwords to derive")
    p.add_argument("--randomize", action="store_true",
                   help="Seed from the system random source instead of the images (not reproducible)")
    p.add_argument("--preview", "-p", action="store_true", help="Print the generated password(s)")
    p.add_argument("--show-bitmap", action="store_true", help="Print each normalized 64x64 bitmap")
    p.add_argument("--gif", default="", help="Write the normalized bitmaps to this GIF")
    p.add_argument("--frames", default="", help="Dump the normalized bitmaps as PNGs into this folder")
    p.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="Logging level (default %(default)s)")
    return p

def main(argv: Optional[List[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.image and not args.dir:
        p.error("give at least one --image or a --dir")
    if args.count < 1:
        p.error("--count must be at least 1")

    try:
        policy = make_policy(args.length, args.chars)
        paths = collect_paths(args.image, args.dir)
        buffers = []
        for path in paths:
            buf = load_pixel_buffer(path)
            print(f"[pixelpass] loaded {path} ({buf.width}x{buf.height})")
            buffers.append(buf)
        result = passwords_from_buffers(buffers, policy, count=args.count, randomize=args.randomize)

        for path, bm in zip(paths, result["bitmaps"]):
            report_bitmap(path, bm, args.show_bitmap)
        if args.gif:
            save_bitmaps_gif(result["bitmaps"], args.gif)
            print(f"[pixelpass] wrote {args.gif}")
        if args.frames:
            dump_bitmaps_png(result["bitmaps"], args.frames)
            print(f"[pixelpass] wrote {len(result['bitmaps'])} frame(s) to {args.frames}")
    except (PixelPassError, ValueError, OSError) as e:
        print(f"[pixelpass] error: {e}", file=sys.stderr)
        return 1

    log.info("root digest %s", result["digest_hex"] or "(randomized)")
    print(f"[pixelpass] {len(result['passwords'])} password(s), {result['length']} characters, "
          f"~{result['entropy_bits']:.1f} bits each")
    if args.preview:
        for i, pwd in enumerate(result["passwords"], start=1):
            print(f"{i:>3}: {pwd}")
    else:
        print("[pixelpass] use --preview to show the password(s)")
    return 0

if __name__ == "__main__":
    sys.exit(main())
