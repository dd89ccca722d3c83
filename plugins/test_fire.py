#!/usr/bin/env python3
"""
Tests for the DoomFire aggregate, surfaces, clocks and the headless snap.
"""

import importlib.util
import os
import subprocess
import sys
import time
import types

import numpy as np
import pytest
from PIL import Image
from doom_fire import (
    ArraySurface, DisplaySurface, DoomFire, InvalidSurface, ManualFrameClock,
    ThreadedFrameClock, color_of,
)
from doom_fire.__main__ import main, snap


class FixedDecays:
    def __init__(self, value):
        self.value = value

    def integers(self, low, high, size=None):
        return np.full(size, self.value, dtype=np.int64)


class NoContextSurface(DisplaySurface):
    def open(self, width, height):
        return False

    def present(self, buffer, width, height):
        raise AssertionError("never presented")


class ExplodingSurface(NoContextSurface):
    def open(self, width, height):
        raise RuntimeError("no display")


def test_invalid_surface():
    print("Testing InvalidSurface...")
    with pytest.raises(InvalidSurface):
        DoomFire(None)
    with pytest.raises(InvalidSurface):
        DoomFire(object())
    with pytest.raises(InvalidSurface):
        DoomFire(NoContextSurface())
    with pytest.raises(InvalidSurface) as excinfo:
        DoomFire(ExplodingSurface())
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    print("  ✓ Bad surfaces rejected")


def test_invalid_parameters():
    for kwargs in ({"fps": 0}, {"width": 0}, {"height": -2}):
        with pytest.raises(ValueError):
            DoomFire(ArraySurface(), **kwargs)
    with pytest.raises(ValueError):
        DoomFire(ArraySurface(), drift="sideways")


def test_surface_opened_at_grid_size():
    surface = ArraySurface()
    DoomFire(surface, width=12, height=9)
    assert surface.image.shape == (9, 12, 4)
    assert surface.frames_presented == 0


def test_frame_matches_palette():
    """buffer[4i:4i+4] is the palette color of cell i, row-major."""
    print("Testing rendered frame layout...")
    surface = ArraySurface()
    fire = DoomFire(surface, width=16, height=10, seed=5)
    for _ in range(8):
        buffer = fire.step()

    assert buffer.dtype == np.uint8 and buffer.size == 4 * 16 * 10
    for i, level in enumerate(fire.grid.cells.tolist()):
        assert tuple(buffer[4 * i:4 * i + 4]) == color_of(level)
    assert np.array_equal(surface.image.reshape(-1), buffer)
    assert surface.frames_presented == 8
    print("  ✓ Frame layout matches palette")


def test_animates_on_manual_clock():
    surface = ArraySurface()
    fire = DoomFire(surface, fps=30, width=8, height=6, rng=FixedDecays(0))
    clock = ManualFrameClock()
    fire.start(clock)
    assert fire.running

    clock.tick(0.0)
    clock.tick(10.0)
    assert surface.frames_presented == 0
    clock.tick(40.0)
    assert surface.frames_presented == 1
    # Bottom two rows are white: the source and its first upward copy
    assert (surface.image[-2:] == 255).all()
    assert (surface.image[:-2, :, 3] == 0).all()


def test_destroy_is_idempotent():
    print("Testing destroy...")
    surface = ArraySurface()
    fire = DoomFire(surface, width=8, height=6)
    fire.destroy()  # before start

    clock = ManualFrameClock()
    fire.start(clock)
    clock.tick(0.0)
    fire.destroy()
    fire.destroy()
    assert not fire.running
    assert clock.pending == 0
    clock.tick(100.0)
    assert surface.frames_presented == 0
    print("  ✓ Destroy safe to repeat")


def test_extinguish_and_ignite():
    fire = DoomFire(ArraySurface(), width=10, height=7, rng=FixedDecays(0))
    for _ in range(7):
        fire.step()
    assert (fire.grid.cells == 36).all()

    fire.extinguish()
    for _ in range(7):
        fire.step()
    assert (fire.grid.cells == 0).all(), "Fire should die out without a source"
    assert fire.stats["burning_pct"] == 0.0

    fire.ignite()
    fire.step()
    assert (fire.grid.rows[-2:] == 36).all()


def test_stats():
    fire = DoomFire(ArraySurface(), width=10, height=5, seed=1)
    stats = fire.stats
    assert stats["generation"] == 0 and stats["frames"] == 0
    assert stats["max"] == 36
    assert stats["burning_pct"] == pytest.approx(20.0)
    fire.step()
    assert fire.stats["generation"] == 1
    assert fire.stats["frames"] == 1


def test_threaded_clock_drives_fire():
    surface = ArraySurface()
    fire = DoomFire(surface, fps=100, width=20, height=12, seed=2)
    clock = ThreadedFrameClock(rate=200)
    try:
        fire.start(clock)
        deadline = time.time() + 5.0
        while fire.stats["generation"] < 3 and time.time() < deadline:
            time.sleep(0.02)
    finally:
        fire.destroy()
        clock.close()
    assert fire.stats["generation"] >= 3
    assert surface.frames_presented == fire.stats["frames"]


def test_snap_writes_png(tmp_path):
    print("Testing headless snap...")
    out = tmp_path / "shots" / "fire.png"
    path = snap(20, 30, 24, 16, seed=4, out=str(out))
    assert out.exists()
    with Image.open(path) as img:
        assert img.size == (24, 16)
        assert img.mode == "RGBA"
    print("  ✓ Snapshot saved")


def test_cli():
    assert main(["--bogus"]) == 2
    assert main(["--help"]) == 0


def test_cli_rejects_bad_values(capsys):
    print("Testing CLI value errors...")
    for argv in (["--size", "80"], ["--size", "80xabc"], ["--size", "0x5"],
                 ["--fps", "fast"], ["--fps", "0"], ["--scale", "-1"],
                 ["--snap", "many"]):
        assert main(argv) == 2, f"{argv} should be rejected"
        out = capsys.readouterr().out
        assert f"Invalid value for {argv[0]}" in out
        assert "Traceback" not in out

    assert main(["--drift", "sideways"]) == 2
    out = capsys.readouterr().out
    assert "Invalid value for --drift" in out
    assert "wrap or clamp" in out
    assert "Unknown argument" not in out
    print("  ✓ Bad values reported with usage")


def test_cli_opens_viewer_lazily(monkeypatch):
    """Without --snap, main() imports the viewer module and runs it."""
    opened = []

    class FakeViewer:
        def __init__(self, **kwargs):
            opened.append(kwargs)

        def run(self):
            opened.append("ran")

    fake = types.ModuleType("doom_fire.viewer")
    fake.Viewer = FakeViewer
    fake.DEFAULT_SCALE = 8
    monkeypatch.setitem(sys.modules, "doom_fire.viewer", fake)

    assert main(["--size", "20x10", "--drift", "clamp"]) == 0
    assert opened[0]["width"] == 20 and opened[0]["height"] == 10
    assert opened[0]["drift"] == "clamp" and opened[0]["scale"] == 8
    assert opened[1] == "ran"


def test_viewer_ships_but_core_never_loads_it():
    """viewer.py is part of the package; only the entry point imports it."""
    spec = importlib.util.find_spec("doom_fire.viewer")
    assert spec is not None and spec.origin.endswith("viewer.py")

    plugins_dir = os.path.dirname(os.path.abspath(__file__))
    code = ("import sys, doom_fire, doom_fire.__main__; "
            "print('doom_fire.viewer' in sys.modules, 'pygame' in sys.modules)")
    env = dict(os.environ, PYTHONPATH=plugins_dir)
    result = subprocess.run([sys.executable, "-c", code], capture_output=True,
                            text=True, env=env, check=True)
    assert result.stdout.split() == ["False", "False"]


def test_render_shows_seeded_source():
    """render() draws the current grid without advancing it."""
    surface = ArraySurface()
    fire = DoomFire(surface, width=8, height=6, seed=3)
    buffer = fire.render()

    assert surface.frames_presented == 1
    assert fire.stats["generation"] == 0
    assert (surface.image[-1] == 255).all(), "Heat source row should be white"
    assert (surface.image[:-1, :, 3] == 0).all()
    assert buffer is fire.frame


def test_threaded_clock_stops_on_callback_error(capsys):
    print("Testing threaded clock error path...")
    clock = ThreadedFrameClock(rate=200)
    calls = []

    def explode(t):
        calls.append(t)
        raise RuntimeError("boom")

    clock.request_callback(explode)
    thread = clock._thread
    thread.join(5.0)

    assert not thread.is_alive(), "Clock thread should exit after a failing callback"
    assert not clock._running
    assert len(calls) == 1
    assert "[Fire] Frame callback error: boom" in capsys.readouterr().out
    clock.close()


if __name__ == "__main__":
    import tempfile
    from pathlib import Path

    print("\n=== Testing Doom Fire ===\n")

    test_invalid_surface()
    test_invalid_parameters()
    test_surface_opened_at_grid_size()
    test_frame_matches_palette()
    test_animates_on_manual_clock()
    test_destroy_is_idempotent()
    test_extinguish_and_ignite()
    test_stats()
    test_render_shows_seeded_source()
    test_threaded_clock_drives_fire()
    test_viewer_ships_but_core_never_loads_it()
    with tempfile.TemporaryDirectory() as tmp:
        test_snap_writes_png(Path(tmp))
    test_cli()

    print("\n✓ All tests passed!\n")
