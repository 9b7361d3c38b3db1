#!/usr/bin/env python3
# Snapshot generated maps to PNG using Pillow, one colored square per cell
# with the kind's glyph on top. Debugging aid only.

import argparse, os
from PIL import Image, ImageDraw, ImageFont

from towergen.config import GenerationConfig, MapSize, PathLength
from towergen.mapgen.generator import generate_map
from towergen.tiles import TileKind, is_path

from tdtool import GLYPHS


def _fill_color(kind):
    if kind in (TileKind.START_UD, TileKind.START_LR):
        return (60, 200, 60, 255)
    if kind in (TileKind.END_UD, TileKind.END_LR):
        return (220, 60, 60, 255)
    if is_path(kind):
        return (210, 180, 120, 255)
    if kind == TileKind.TOWER_PLOT:
        return (90, 90, 200, 255)
    if kind == TileKind.DECORATION:
        return (40, 140, 40, 255)
    if kind == TileKind.DECORATION2:
        return (120, 120, 120, 255)
    return (235, 235, 235, 255)


def tile_image(kind, tile_size, font):
    img = Image.new("RGBA", (tile_size, tile_size), color=_fill_color(kind))
    draw = ImageDraw.Draw(img)
    text = GLYPHS[kind].strip()
    if text:
        tw = draw.textlength(text, font=font)
        draw.text(((tile_size - tw) / 2, (tile_size - 8) / 2), text, fill=(0, 0, 0, 255), font=font)
    return img


def render_tiles(tiles, out_png, tile_size=16, margin=0):
    side = len(tiles)
    w = h = side * tile_size + 2 * margin
    canvas = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    font = ImageFont.load_default()
    cache = {}
    for r, row in enumerate(tiles):
        for c, kind in enumerate(row):
            if kind not in cache:
                cache[kind] = tile_image(kind, tile_size, font)
            img = cache[kind]
            x0 = margin + c * tile_size
            y0 = margin + r * tile_size
            canvas.paste(img, (x0, y0, x0 + tile_size, y0 + tile_size), img)
    out_dir = os.path.dirname(out_png)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    canvas.save(out_png)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--size", choices=[m.name.lower() for m in MapSize], default="large")
    ap.add_argument("--length", choices=[m.name.lower() for m in PathLength], default="medium")
    ap.add_argument("--split", action="store_true")
    ap.add_argument("--towers", type=float, default=0.2)
    ap.add_argument("--decor", type=float, default=0.3)
    ap.add_argument("--seed", type=int, required=True, help="First seed of the run")
    ap.add_argument("--count", type=int, default=1, help="Consecutive seeds to render")
    ap.add_argument("--outdir", type=str, default="out/png", help="Where to write PNGs")
    ap.add_argument("--tile", type=int, default=16, help="Tile size in pixels")
    args = ap.parse_args()

    cfg = GenerationConfig(
        size=args.size, path_length=args.length, want_split=args.split,
        tower_density=args.towers, decor_density=args.decor,
    )
    for seed in range(args.seed, args.seed + args.count):
        gm = generate_map(cfg, seed=seed)
        render_tiles(gm.tiles, os.path.join(args.outdir, f"{seed}.png"), tile_size=args.tile)
    print(f"Wrote PNGs to {args.outdir}")


if __name__ == "__main__":
    main()
