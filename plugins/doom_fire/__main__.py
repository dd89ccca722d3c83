"""
Doom Fire Viewer - Entry Point

Usage:
    python -m doom_fire [--fps N] [--size WxH] [--scale N] [--seed N]
                        [--drift wrap|clamp] [--snap N] [--out PATH]

Examples:
    python -m doom_fire
    python -m doom_fire --size 160x100 --scale 4
    python -m doom_fire --fps 60 --drift clamp
    python -m doom_fire --snap 200 --out screenshots/fire.png

--snap runs headless (no pygame window) for N generations and saves
the last frame as a PNG.
"""

import os
import sys

from .clock import ManualFrameClock
from .fire import DoomFire, DEFAULT_FPS, DEFAULT_WIDTH, DEFAULT_HEIGHT
from .propagation import DRIFT_MODES
from .surface import ArraySurface


# Headless snaps tick the clock like a 60Hz display would
SNAP_TICK_MS = 1000.0 / 60

_EXPECTED = {
    "--fps": "a positive number",
    "--size": "WxH with positive integers",
    "--scale": "a positive integer",
    "--seed": "an integer",
    "--drift": " or ".join(DRIFT_MODES),
    "--snap": "an integer",
}


def snap(generations, fps, width, height, seed=None, drift="wrap", out=None):
    """Headless mode: run N generations, save the last frame, exit."""
    if out is None:
        out = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots", "fire.png"
        )

    surface = ArraySurface()
    fire = DoomFire(surface, fps=fps, width=width, height=height,
                    seed=seed, drift=drift)
    clock = ManualFrameClock()
    fire.start(clock)

    print(f"  running {generations} generations...", end="", flush=True)
    while fire.stats["generation"] < generations:
        clock.advance(SNAP_TICK_MS)
    fire.destroy()

    surface.save(out)
    print(f" saved: {out}")
    return out


def main(argv=None):
    fps = DEFAULT_FPS
    width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
    scale = None
    seed = None
    drift = "wrap"
    snap_steps = 0
    out = None

    args = sys.argv[1:] if argv is None else argv
    i = 0
    while i < len(args):
        arg = args[i]
        value = args[i + 1] if i + 1 < len(args) else None
        try:
            if arg == "--fps" and value is not None:
                fps = float(value)
                if fps <= 0:
                    raise ValueError(value)
                i += 2
            elif arg == "--size" and value is not None:
                w_str, h_str = value.split("x")
                width, height = int(w_str), int(h_str)
                if width < 1 or height < 1:
                    raise ValueError(value)
                i += 2
            elif arg == "--scale" and value is not None:
                scale = int(value)
                if scale < 1:
                    raise ValueError(value)
                i += 2
            elif arg == "--seed" and value is not None:
                seed = int(value)
                i += 2
            elif arg == "--drift" and value is not None:
                if value not in DRIFT_MODES:
                    raise ValueError(value)
                drift = value
                i += 2
            elif arg == "--snap" and value is not None:
                snap_steps = int(value)
                i += 2
            elif arg == "--out" and value is not None:
                out = value
                i += 2
            elif arg in ("--help", "-h"):
                print(__doc__)
                return 0
            else:
                print(f"Unknown argument: {arg}")
                print("Use --help to see available options")
                return 2
        except ValueError:
            print(f"Invalid value for {arg}: {value!r} (expected {_EXPECTED[arg]})")
            print("Use --help to see available options")
            return 2

    if snap_steps > 0:
        print(f"Headless snap mode: {width}x{height} @ {fps:g} fps, "
              f"{snap_steps} generations")
        snap(snap_steps, fps, width, height, seed=seed, drift=drift, out=out)
        return 0

    from .viewer import Viewer, DEFAULT_SCALE

    print("Starting Doom Fire Viewer")
    print(f"  Grid: {width}x{height}")
    print(f"  Target FPS: {fps:g}")
    print(f"  Drift: {drift}")
    print()

    viewer = Viewer(
        fps=fps,
        width=width,
        height=height,
        scale=DEFAULT_SCALE if scale is None else scale,
        seed=seed,
        drift=drift,
    )
    viewer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
