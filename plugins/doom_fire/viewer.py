"""
Interactive Pygame Viewer for the Doom Fire

Opens a window, scales the fire grid up by an integer factor, and drives
the fire from the window's main loop: each pass through the loop is one
frame-clock tick, paced at the display rate with pygame's Clock.

Controls:
  SPACE       Extinguish / reignite the heat source
  H           Toggle HUD overlay
  S           Save screenshot
  Q / ESC     Quit
"""

import os
import time
import pygame

from .clock import FrameClock
from .errors import InvalidSurface
from .fire import DoomFire, DEFAULT_FPS, DEFAULT_WIDTH, DEFAULT_HEIGHT
from .surface import DisplaySurface


DEFAULT_SCALE = 8
DISPLAY_HZ = 60
BG_COLOR = (0, 0, 0)


class PygameSurface(DisplaySurface):
    """Pygame window surface. Each fire pixel is a scale x scale block."""

    def __init__(self, scale=DEFAULT_SCALE, caption="Doom Fire"):
        self.scale = scale
        self.caption = caption
        self.screen = None

    def open(self, width, height):
        pygame.init()
        try:
            self.screen = pygame.display.set_mode(
                (width * self.scale, height * self.scale))
        except pygame.error as e:
            pygame.quit()
            raise InvalidSurface(f"Could not open pygame window: {e}") from e
        pygame.display.set_caption(self.caption)
        return self.screen is not None

    def present(self, buffer, width, height):
        image = pygame.image.frombuffer(buffer.tobytes(), (width, height), "RGBA")
        scaled = pygame.transform.scale(image, self.screen.get_size())
        self.screen.fill(BG_COLOR)
        self.screen.blit(scaled, (0, 0))

    def close(self):
        self.screen = None
        pygame.quit()


class PygameFrameClock(FrameClock):
    """Frame clock ticked once per viewer loop with pygame.time.get_ticks()."""

    def __init__(self):
        self._fn = None
        self._handle = 0

    def request_callback(self, fn):
        self._handle += 1
        self._fn = fn
        return self._handle

    def cancel(self, handle):
        if handle == self._handle:
            self._fn = None

    def fire(self):
        fn, self._fn = self._fn, None
        if fn is not None:
            fn(float(pygame.time.get_ticks()))


class Viewer:

    def __init__(self, fps=DEFAULT_FPS, width=DEFAULT_WIDTH,
                 height=DEFAULT_HEIGHT, scale=DEFAULT_SCALE, seed=None,
                 drift="wrap"):
        self.surface = PygameSurface(scale=scale)
        self.fire = DoomFire(self.surface, fps=fps, width=width, height=height,
                             seed=seed, drift=drift)
        self.clock = PygameFrameClock()
        self.running = True
        self.show_hud = True
        self.burning = True
        self.hud_font = None
        self.fps_history = []

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.fire.stats
        line = (f"Gen: {stats['generation']:,}  |  "
                f"Burning: {stats['burning_pct']:.1f}%  |  "
                f"{self.fire.width}x{self.fire.height} @ {self.fire.fps:g}  |  "
                f"FPS: {fps:.0f}")
        if not self.burning:
            line = "[OUT]  " + line

        bg_surface = pygame.Surface((screen.get_width(), 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))

        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (10, 6))

    def _save_screenshot(self, screen):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"fire_{timestamp}.png")
        pygame.image.save(screen, path)
        print(f"[Fire] Screenshot saved: {path}")

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.burning = not self.burning
            if self.burning:
                self.fire.ignite()
            else:
                self.fire.extinguish()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot(screen)

    def run(self):
        """Main viewer loop."""
        screen = self.surface.screen
        pacer = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        # Show the seeded heat source before the first generation is due
        self.fire.render()
        self.fire.start(self.clock)
        try:
            while self.running:
                frame_start = time.time()

                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_keydown(event, screen)

                self.clock.fire()

                # Redraw the last frame so the HUD does not smear
                self.surface.present(self.fire.frame, self.fire.width, self.fire.height)

                frame_time = time.time() - frame_start
                self.fps_history.append(frame_time)
                if len(self.fps_history) > 30:
                    self.fps_history.pop(0)
                avg_fps = 1.0 / max(sum(self.fps_history) / len(self.fps_history), 0.001)
                self._draw_hud(screen, avg_fps)

                pygame.display.flip()
                pacer.tick(DISPLAY_HZ)
        finally:
            self.fire.destroy()
            self.surface.close()
