"""
sensor.py – Library facade: the AS5050 class
=============================================
AS5050 is the main entry point of the library. It wires the transport,
the transaction engine, the angle tracker and the fault manager
together behind a small angle-oriented API.

Typical use:
    from as5050 import AS5050

    with AS5050() as sensor:
        sensor.set_home()
        while True:
            print(f"{sensor.delta_angle_degrees():8.2f} deg")
"""

import logging

from .constants import (
    REG_NAMES, REG_GAIN_CONTROL, REG_MASTER_RESET, NUM_ANGLE_SAMPLES,
)
from .engine import TransactionEngine
from .faults import FaultManager
from .tracker import AngleTracker, to_degrees, to_radians
from .protocol.frame import TransactionResult

logger = logging.getLogger(__name__)


class AS5050:
    """
    High-level interface to one AS5050 sensor.

    Parameters
    ----------
    transport : Transport | None
        Object providing select / transfer_word / deselect. None opens an
        SPITransport on the Raspberry Pi with default pins.
    mirror : bool
        Reverse the direction of rotation.
    samples : int
        Number of raw samples averaged by angle().
    auto_handle_faults : bool
        Handle sensor faults as soon as a sample reports them.
    reset_on_persistent_fault : bool
        Issue a master reset when errors survive a clear.
    reset_on_startup : bool
        Issue a master reset before the warm-up reads.
    max_sample_interval : float | None
        Longest allowed time between samples [s], see
        tracker.max_sample_interval_for().
    verbose : bool
        Print one line per register transaction.
    log : CommunicationLog | None
        Records every SPI exchange.

    Example
    -------
    sensor = AS5050(mirror=True, samples=4)
    print(sensor.angle_degrees())
    if sensor.handle_faults():
        print("unresolved:", sensor.status())
    sensor.close()
    """

    def __init__(
        self,
        transport=None,
        *,
        mirror:                    bool  = False,
        samples:                   int   = NUM_ANGLE_SAMPLES,
        auto_handle_faults:        bool  = True,
        reset_on_persistent_fault: bool  = False,
        reset_on_startup:          bool  = True,
        max_sample_interval:       float | None = None,
        verbose:                   bool  = False,
        log=None,
    ):
        if samples < 1:
            raise ValueError(f"samples must be >= 1, got {samples}")
        if transport is None:
            from .core.transport import SPITransport
            transport = SPITransport()
        self._transport = transport
        self.samples    = samples
        self.verbose    = verbose

        self._engine = TransactionEngine(transport, log=log)
        self._faults = FaultManager(
            self._engine,
            reset_on_persistent_fault=reset_on_persistent_fault,
        )
        if reset_on_startup:
            # Full reset in case the chip glitched during the last power cycle
            self.write(REG_MASTER_RESET, 0)
        self._tracker = AngleTracker(
            self._engine,
            self._faults,
            mirror=mirror,
            auto_handle_faults=auto_handle_faults,
            max_sample_interval=max_sample_interval,
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def close(self) -> None:
        """Releases the transport if it can be closed."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    def read(self, register: int) -> TransactionResult:
        """
        Reads a register.

        Parameters
        ----------
        register : int
            Register address (e.g. REG_ANGLE = 0x3FFF).

        Returns
        -------
        TransactionResult
        """
        if self.verbose:
            print(f"[READ]  reg={REG_NAMES.get(register, f'0x{register:04X}')}")
        return self._engine.read(register)

    def write(self, register: int, data: int) -> TransactionResult:
        """
        Writes a register.

        Parameters
        ----------
        register : int
            Register address.
        data : int
            Value to write (14 bits).

        Returns
        -------
        TransactionResult
            Decoded confirmation frame.
        """
        if self.verbose:
            print(f"[WRITE] reg={REG_NAMES.get(register, f'0x{register:04X}')} data=0x{data:04X}")
        return self._engine.write(register, data)

    def read_gain(self) -> tuple[bool, int]:
        """Reads REG_GAIN_CONTROL. Returns (parity_ok, gain)."""
        result = self.read(REG_GAIN_CONTROL)
        return result.parity_ok, result.payload

    def write_gain(self, gain: int) -> bool:
        """Writes REG_GAIN_CONTROL. Returns True if the confirmation is clean."""
        result = self.write(REG_GAIN_CONTROL, gain)
        return result.parity_ok and not result.error_flag_set

    def reset_bus(self) -> None:
        """Resets the SPI bus (closes and reopens spidev)."""
        self._transport.reset()

    def reset(self) -> int:
        """
        Master reset followed by the warm-up reads.

        Returns the angle recorded as the new home position.
        """
        self.write(REG_MASTER_RESET, 0)
        return self._tracker.warm_up(rehome=True)

    # ------------------------------------------------------------------
    # Angle
    # ------------------------------------------------------------------

    def angle(self) -> int:
        """Raw angle in [0, 1024), averaged over `samples` reads."""
        if self.samples == 1:
            return self._tracker.sample_raw()
        return self._tracker.sample_filtered(self.samples)

    def angle_degrees(self) -> float:
        return to_degrees(self.angle())

    def angle_radians(self) -> float:
        return to_radians(self.angle())

    def total_angle(self) -> int:
        """
        Multi-turn angle in native units, averaged over `samples` unwrapped
        positions.
        """
        return self._tracker.sample_continuous(self.samples)

    def total_angle_degrees(self) -> float:
        return to_degrees(self.total_angle())

    def total_angle_radians(self) -> float:
        return to_radians(self.total_angle())

    def delta_angle(self) -> int:
        """Multi-turn angle relative to the home position, native units."""
        return self.total_angle() - self._tracker.home_offset

    def delta_angle_degrees(self) -> float:
        return to_degrees(self.delta_angle())

    def delta_angle_radians(self) -> float:
        return to_radians(self.delta_angle())

    def set_home(self) -> None:
        """Makes the current position the zero of delta_angle()."""
        self._tracker.set_home()

    @property
    def mirror(self) -> bool:
        return self._tracker.mirror

    @mirror.setter
    def mirror(self, value: bool) -> None:
        self._tracker.mirror = value

    @property
    def rotations(self) -> int:
        return self._tracker.turn_count

    # ------------------------------------------------------------------
    # Faults
    # ------------------------------------------------------------------

    def status(self) -> int:
        """Current content of REG_ERROR_STATUS (0 = no errors)."""
        return self._faults.poll()

    def handle_faults(self) -> int:
        """
        Runs one fault-handling cycle.

        Returns the residual error status; 0 means everything was
        resolved. A reset issued while handling makes the next angle read
        warm up first.
        """
        residual = self._faults.handle_faults()
        report = self._faults.last_report
        if report is not None and report.reset_issued:
            self._tracker.request_warm_up()
        if residual:
            logger.warning("Unresolved AS5050 faults: 0x%03X", residual)
        return residual

    # ------------------------------------------------------------------
    # Components (advanced use)
    # ------------------------------------------------------------------

    @property
    def engine(self) -> TransactionEngine:
        return self._engine

    @property
    def tracker(self) -> AngleTracker:
        return self._tracker

    @property
    def faults(self) -> FaultManager:
        return self._faults

    @property
    def transport(self):
        """Direct access to the transport (advanced use)."""
        return self._transport
