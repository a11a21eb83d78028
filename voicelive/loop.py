"""
Detection loop: the real-time listen -> detect -> correct -> publish cycle.

Each tick:
  1. Pull the most recent frame from the frame source
  2. Estimate its pitch (None = nothing usable this tick)
  3. Name the note and compute the correction shift ratio
  4. Store a fresh CorrectionState snapshot
  5. Call every listener with (frequency, note, shift_ratio)
  6. Ask the ticker for the next tick

Everything runs on the caller's thread, one tick at a time. Key and amount can
be changed between ticks; a change made during a tick (e.g. by a listener)
takes effect on the next one.
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Optional

from voicelive.config import VOCAL_PRESETS
from voicelive.correction import Key, compute_shift_ratio
from voicelive.notes import to_note
from voicelive.pitch import AutocorrelationDetector
from voicelive.ticker import AsyncioTicker

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    IDLE = "idle"
    SAMPLING = "sampling"


@dataclass(frozen=True)
class CorrectionState:
    """Snapshot of the correction settings and the last tick's result."""

    target_key: Key = Key()
    amount: float = 0.0  # 0-1
    last_detected: Optional[float] = None
    shift_ratio: float = 1.0


class DetectionLoop:
    """
    Polling controller tying a frame source to the pitch engine.

    Args:
        detector: Object with .detect(audio, sr) -> Optional[float].
                  Defaults to AutocorrelationDetector.
        ticker: Object with .schedule(callback) -> handle with .cancel().
                Defaults to an AsyncioTicker at TICK_INTERVAL.
    """

    def __init__(self, detector=None, ticker=None, key="C", amount=0):
        self.detector = detector or AutocorrelationDetector()
        self.ticker = ticker or AsyncioTicker()
        self._listeners = []
        self._source = None
        self._handle = None
        self._loop_state = LoopState.IDLE
        self._state = CorrectionState()
        self.set_key(key)
        self.set_amount(amount)

    @property
    def loop_state(self):
        return self._loop_state

    @property
    def state(self):
        """Current CorrectionState. Immutable, safe to hold on to."""
        return self._state

    @property
    def is_sampling(self):
        return self._loop_state is LoopState.SAMPLING

    # --- Listeners ---

    def subscribe(self, listener):
        """Register listener(frequency, note, shift_ratio), called every tick."""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener):
        self._listeners.remove(listener)

    # --- Configuration ---

    def set_key(self, root):
        self._state = replace(self._state, target_key=Key(root))

    def set_amount(self, percent):
        """Set the correction amount in percent (0-100)."""
        clamped = max(0, min(100, percent))
        if clamped != percent:
            logger.warning("Correction amount %s out of range, using %s", percent, clamped)
        self._amount_percent = clamped
        self._state = replace(self._state, amount=clamped / 100)

    def apply_preset(self, name):
        """Load key and amount from a VOCAL_PRESETS entry. Unknown names raise KeyError."""
        preset = VOCAL_PRESETS[name]
        self.set_key(preset["key"])
        self.set_amount(preset["amount"])
        logger.info("Applied preset %s (key=%s, amount=%s%%)", name, preset["key"], preset["amount"])

    # --- Lifecycle ---

    def start(self, frame_source):
        """Start sampling: run one tick right away, then keep ticking."""
        if self.is_sampling:
            logger.debug("start() ignored, loop already sampling")
            return
        self._source = frame_source
        self._loop_state = LoopState.SAMPLING
        logger.info("Detection loop started")
        self.tick()

    def stop(self):
        """Stop sampling and cancel the pending tick. Safe to call when idle."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if not self.is_sampling:
            return
        self._loop_state = LoopState.IDLE
        self._source = None
        logger.info("Detection loop stopped")

    def tick(self):
        """Run one pull -> detect -> publish cycle and schedule the next one."""
        self._handle = None
        if not self.is_sampling:
            return

        # Any failure stops the loop before propagating
        try:
            samples, sample_rate = self._source.pull()
            frequency = self.detector.detect(samples, sample_rate)
            note = to_note(frequency) if frequency is not None else None

            state = self._state
            ratio = compute_shift_ratio(frequency, state.target_key, self._amount_percent)
            self._state = replace(state, last_detected=frequency, shift_ratio=ratio)

            for listener in list(self._listeners):
                listener(frequency, note, ratio)

            # A listener may have stopped (or stopped and restarted) the loop
            if self.is_sampling and self._handle is None:
                self._handle = self.ticker.schedule(self.tick)
        except Exception:
            logger.exception("Detection tick failed, stopping detection loop")
            self.stop()
            raise
