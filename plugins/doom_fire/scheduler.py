"""
Frame Scheduler

Decouples the simulation rate from the clock's callback rate. The clock
may call back at 60Hz while the fire only advances at, say, 30 fps:
callbacks that arrive before a full interval has elapsed are skipped.

When a generation is due, the committed timestamp is rebased to
t - (elapsed % interval) rather than t, so the leftover fraction of an
interval carries into the next one and the rate does not drift. At most
one generation runs per callback, however late it arrives.
"""


class FrameScheduler:

    def __init__(self, fps, step, clock=None):
        """
        Args:
            fps: Target generations per second (> 0)
            step: Callable run once per due frame (advance + render)
            clock: FrameClock to register with (may be given to start())
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps!r}")
        self.fps = fps
        self.interval = 1000.0 / fps
        self.step = step
        self.clock = clock
        self.last_committed = None
        self.steps = 0
        self._handle = None
        self._stopped = True

    @property
    def running(self):
        return not self._stopped

    def start(self, clock=None):
        """Begin receiving frame callbacks. No-op if already running."""
        if clock is not None:
            self.clock = clock
        if self.clock is None:
            raise ValueError("FrameScheduler.start() needs a frame clock")
        if self.running:
            return
        self._stopped = False
        self.last_committed = None
        self._handle = self.clock.request_callback(self.on_frame)

    def on_frame(self, timestamp):
        """Frame clock callback. Returns True if a generation ran."""
        self._handle = None
        if self._stopped:
            return False
        self._handle = self.clock.request_callback(self.on_frame)

        if self.last_committed is None:
            self.last_committed = timestamp
            return False

        elapsed = timestamp - self.last_committed
        if elapsed <= self.interval:
            return False

        self.last_committed = timestamp - (elapsed % self.interval)
        self.steps += 1
        self.step()
        return True

    def stop(self):
        """Cancel the pending callback. Safe to call any number of times."""
        self._stopped = True
        if self._handle is not None and self.clock is not None:
            self.clock.cancel(self._handle)
        self._handle = None
