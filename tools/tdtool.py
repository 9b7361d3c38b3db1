#!/usr/bin/env python3
# Print generated tower-defense maps as glyph grids, or time a batch of them.

import argparse, logging, sys, time

from towergen.config import GenerationConfig, MapSize, PathLength
from towergen.errors import TowerGenError
from towergen.mapgen.generator import generate_map
from towergen.tiles import TileKind

# Indexed by TileKind ordinal; keep in step with the enum.
GLYPHS = {
    TileKind.END_UD: "Y",
    TileKind.END_LR: "Z",
    TileKind.START_UD: "A",
    TileKind.START_LR: "B",
    TileKind.HORIZ_PATH: "─",
    TileKind.VERT_PATH: "│",
    TileKind.ELBOW_LEFT_UP: "┘",
    TileKind.ELBOW_RIGHT_UP: "└",
    TileKind.ELBOW_LEFT_DOWN: "┐",
    TileKind.ELBOW_RIGHT_DOWN: "┌",
    TileKind.SPLIT_UDL: "┤",
    TileKind.SPLIT_UDR: "├",
    TileKind.SPLIT_ULR: "┴",
    TileKind.SPLIT_DLR: "┬",
    TileKind.SPLIT_4WAYS: "┼",
    TileKind.EMPTY: " ",
    TileKind.CURRENTLY_PLACING: "C",
    TileKind.DECORATION: "D",
    TileKind.DECORATION2: "2",
    TileKind.TOWER_PLOT: "T",
}


def render_text(tiles):
    return "\n".join("".join(GLYPHS[k] for k in row) for row in tiles)


def config_from_args(args):
    return GenerationConfig(
        size=args.size,
        path_length=args.length,
        want_split=args.split,
        tower_density=args.towers,
        decor_density=args.decor,
        max_attempts=args.max_attempts,
    )


def cmd_show(args):
    gm = generate_map(config_from_args(args), seed=args.seed)
    t = gm.grid.tally()
    print(render_text(gm.tiles))
    print(f"Seed: {gm.seed}  Attempts: {gm.attempts}")
    print(f"Path Length: {gm.path_length}  Path Tile Count: {t['path']}")
    print(f"Split-Tower-Decor Count: {t['split']}-{t['tower']}-{t['decoration']}")
    print(f"Run Time: {gm.metrics['runtime_ms']:.1f} ms")


def cmd_batch(args):
    cfg = config_from_args(args)
    seed = args.seed
    attempts = []
    t0 = time.perf_counter()
    for i in range(args.count):
        gm = generate_map(cfg, seed=None if seed is None else seed + i)
        attempts.append(gm.attempts)
    elapsed = time.perf_counter() - t0
    print(f"{args.count} maps in {elapsed:.2f}s; attempts min/avg/max "
          f"{min(attempts)}/{sum(attempts) / len(attempts):.1f}/{max(attempts)}")


def main(argv=None):
    p = argparse.ArgumentParser(description="Tower-defense map generator")
    p.add_argument('--log-level', default='WARNING')
    sub = p.add_subparsers(dest='cmd', required=True)

    def common(sp):
        sp.add_argument('--size', choices=[m.name.lower() for m in MapSize], default='large')
        sp.add_argument('--length', choices=[m.name.lower() for m in PathLength], default='medium')
        sp.add_argument('--split', action='store_true')
        sp.add_argument('--towers', type=float, default=0.2)
        sp.add_argument('--decor', type=float, default=0.3)
        sp.add_argument('--seed', type=int, default=None)
        sp.add_argument('--max-attempts', type=int, default=100_000)

    p1 = sub.add_parser('show')
    common(p1)
    p1.set_defaults(func=cmd_show)
    p2 = sub.add_parser('batch')
    common(p2)
    p2.add_argument('--count', type=int, default=10)
    p2.set_defaults(func=cmd_batch)

    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except TowerGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
