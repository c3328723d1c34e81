"""
tracker.py – Continuous multi-turn angle tracking
==================================================
The AS5050 reports a 10-bit absolute angle within one revolution.
AngleTracker turns that stream into a continuous position:

  • samples failing parity are dropped, the last good sample is reused
  • a jump across the 0/RESOLUTION boundary counts one revolution
  • an optional mirror reverses the direction of rotation

Wrap detection uses quarter-revolution bands:

      0        WRAP_BOUND                 WRAP_CEILING     RESOLUTION
      |-----------|---------------------------|-----------------|
        new ≤ bound  ◄── prev > ceiling  : turn_count + 1
        prev < bound ──► new ≥ ceiling   : turn_count - 1

This only holds while the shaft moves less than a quarter turn between
two samples; max_sample_interval makes the limit explicit.
"""

import logging
import math
import time
from dataclasses import dataclass, replace

from .constants import (
    REG_ANGLE, ANGULAR_RESOLUTION, WRAP_BOUND, WRAP_CEILING, WARM_UP_SAMPLES,
)

logger = logging.getLogger(__name__)


def to_degrees(native: float) -> float:
    return native * 360.0 / ANGULAR_RESOLUTION


def to_radians(native: float) -> float:
    return native * math.tau / ANGULAR_RESOLUTION


def wrap_radians(angle: float) -> float:
    """Normalises an angle in radians to [-pi, pi]."""
    return math.atan2(math.sin(angle), math.cos(angle))


def max_sample_interval_for(max_rpm: float) -> float:
    """
    Longest interval between samples [s] at which wrap detection is still
    unambiguous for a shaft turning at up to max_rpm.
    """
    if max_rpm <= 0:
        raise ValueError(f"max_rpm must be positive, got {max_rpm}")
    return 60.0 / (max_rpm * 4)


@dataclass
class TrackerState:
    last_raw_sample: int  = 0
    turn_count:      int  = 0
    home_offset:     int  = 0
    mirror:          bool = False

    @property
    def continuous(self) -> int:
        return self.turn_count * ANGULAR_RESOLUTION + self.last_raw_sample


class AngleTracker:
    """
    Turns raw angle reads into a monotonic multi-turn position.

    Parameters
    ----------
    engine : TransactionEngine
        Register access used for REG_ANGLE reads.
    fault_manager : FaultManager | None
        Receives parity and error-flag escalations.
    mirror : bool
        Reverse the direction of rotation.
    auto_handle_faults : bool
        Run fault_manager.handle_faults() whenever a sample carries the
        error flag or fails parity.
    max_sample_interval : float | None
        Longest allowed time between two samples [s]; later samples are
        counted in late_samples. None disables the check.
    warm_up : bool
        Run the warm-up reads now.
    clock : callable
        Monotonic time source.
    """

    def __init__(
        self,
        engine,
        fault_manager=None,
        *,
        mirror:              bool = False,
        auto_handle_faults:  bool = True,
        max_sample_interval: float | None = None,
        warm_up:             bool = True,
        clock=time.monotonic,
    ):
        self._engine             = engine
        self._faults             = fault_manager
        self.auto_handle_faults  = auto_handle_faults
        self.max_sample_interval = max_sample_interval
        self._clock              = clock
        self._last_sample_time   = None
        self._needs_warm_up      = False
        self.state               = TrackerState(mirror=mirror)
        self.parity_errors       = 0
        self.late_samples        = 0
        if warm_up:
            self.warm_up()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def mirror(self) -> bool:
        return self.state.mirror

    @mirror.setter
    def mirror(self, value: bool) -> None:
        """
        Switching the orientation reflects the stored position so that a
        stationary shaft keeps its turn count and delta_angle() only
        changes sign.
        """
        value = bool(value)
        if value != self.state.mirror:
            top = ANGULAR_RESOLUTION - 1
            self.state.last_raw_sample = top - self.state.last_raw_sample
            self.state.home_offset     = top - self.state.home_offset
            self.state.turn_count      = -self.state.turn_count
        self.state.mirror = value

    @property
    def turn_count(self) -> int:
        return self.state.turn_count

    @property
    def last_raw_sample(self) -> int:
        return self.state.last_raw_sample

    @property
    def home_offset(self) -> int:
        return self.state.home_offset

    @property
    def needs_warm_up(self) -> bool:
        return self._needs_warm_up

    def request_warm_up(self) -> None:
        """Makes the next sample_raw() run the warm-up reads first."""
        self._needs_warm_up = True

    def snapshot(self) -> TrackerState:
        """Detached copy of the tracker state."""
        return replace(self.state)

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------

    def warm_up(self, rehome: bool = True) -> int:
        """
        Flushes the sensor pipeline and records the current angle.

        The first reads after power-up or a reset return stale data, so
        WARM_UP_SAMPLES reads are discarded before the angle is taken.

        Parameters
        ----------
        rehome : bool
            Also make the current angle the home position and zero the
            turn count. Otherwise the recorded angle goes through wrap
            detection like any other sample.

        Returns
        -------
        int
            The recorded raw angle.
        """
        for _ in range(WARM_UP_SAMPLES):
            self._engine.read(REG_ANGLE)
        result = self._engine.read(REG_ANGLE)
        if result.parity_ok:
            angle = self._apply_mirror(result.payload)
            if rehome:
                self.state.last_raw_sample = angle
            else:
                # the shaft may have crossed zero while the sensor was resetting
                self._track_wrap(angle)
        else:
            self.parity_errors += 1
            logger.warning("Parity error during warm-up, keeping angle %d", self.state.last_raw_sample)
        if rehome:
            self.state.turn_count  = 0
            self.state.home_offset = self.state.last_raw_sample
        self._needs_warm_up    = False
        self._last_sample_time = self._clock()
        return self.state.last_raw_sample

    def sample_raw(self) -> int:
        """
        Takes one angle sample and updates the turn count.

        Returns
        -------
        int
            Raw angle in [0, RESOLUTION). On a parity error the previous
            good sample is returned and the state is left unchanged.
        """
        if self._needs_warm_up:
            self.warm_up(rehome=False)

        result = self._engine.read(REG_ANGLE)
        if not result.parity_ok:
            self.parity_errors += 1
            logger.debug("Parity error on REG_ANGLE, sample 0x%04X dropped", result.raw)
            self._escalate()
            return self.state.last_raw_sample

        angle = self._apply_mirror(result.payload)
        self._track_wrap(angle)
        self._check_interval()

        if result.error_flag_set:
            self._escalate()
        return angle

    def sample_filtered(self, n: int) -> int:
        """
        Average of n raw samples, rounded to the nearest integer.

        Raises
        ------
        ValueError
            If n < 1.
        """
        if n < 1:
            raise ValueError(f"Number of samples must be >= 1, got {n}")
        total = 0
        for _ in range(n):
            total += self.sample_raw()
        return (total + n // 2) // n

    def sample_continuous(self, n: int = 1) -> int:
        """
        Average multi-turn position over n samples, rounded to the nearest
        integer.

        Each sample is unwrapped before averaging, so a window that spans
        the zero crossing stays continuous.

        Raises
        ------
        ValueError
            If n < 1.
        """
        if n < 1:
            raise ValueError(f"Number of samples must be >= 1, got {n}")
        total = 0
        for _ in range(n):
            self.sample_raw()
            total += self.continuous_angle()
        return (total + n // 2) // n

    def _apply_mirror(self, angle: int) -> int:
        if self.state.mirror:
            return ANGULAR_RESOLUTION - 1 - angle
        return angle

    def _track_wrap(self, angle: int) -> None:
        last = self.state.last_raw_sample
        if last > WRAP_CEILING and angle <= WRAP_BOUND:
            self.state.turn_count += 1
        elif last < WRAP_BOUND and angle >= WRAP_CEILING:
            self.state.turn_count -= 1
        self.state.last_raw_sample = angle

    def _check_interval(self) -> None:
        now = self._clock()
        if (self.max_sample_interval is not None
                and self._last_sample_time is not None
                and now - self._last_sample_time > self.max_sample_interval):
            self.late_samples += 1
            logger.warning(
                "Sample interval %.6f s exceeds %.6f s, revolution count may be wrong",
                now - self._last_sample_time, self.max_sample_interval,
            )
        self._last_sample_time = now

    def _escalate(self) -> None:
        if self._faults is None or not self.auto_handle_faults:
            return
        self._faults.handle_faults()
        report = self._faults.last_report
        if report is not None and report.reset_issued:
            self.request_warm_up()

    # ------------------------------------------------------------------
    # Derived outputs
    # ------------------------------------------------------------------

    def continuous_angle(self, raw: int | None = None) -> int:
        """turn_count * RESOLUTION + raw (last sample by default)."""
        if raw is None:
            raw = self.state.last_raw_sample
        return self.state.turn_count * ANGULAR_RESOLUTION + raw

    def delta_angle(self, raw: int | None = None) -> int:
        """Continuous angle relative to the home position."""
        return self.continuous_angle(raw) - self.state.home_offset

    def set_home(self) -> None:
        """
        Makes the current position the new zero for delta_angle().

        The turn count is zeroed and the home offset anchored to the last
        raw sample; the raw sample itself is not touched.
        """
        self.state.turn_count  = 0
        self.state.home_offset = self.state.last_raw_sample
