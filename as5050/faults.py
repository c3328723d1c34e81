"""
faults.py – Fault classification and self-healing
==================================================
The AS5050 latches error conditions in REG_ERROR_STATUS and raises the
error flag (EF) in every response until the errors are cleared by a
read of REG_CLEAR_ERROR. FaultManager interprets that register:

  ERR_PARITY              terminal for this cycle, no writes
  ERR_DSPAHI / ERR_DSPALO gain one step down / up
  ERR_WOW / ERR_DSPOV     software reset, position tracking re-warms up
  ERR_DACOV / ERR_RANERR  hardware warning, surfaced only
  ERR_MODE / ERR_CLKMON /
  ERR_ADDMON              logged only

then clears the errors and returns what is left.
"""

import logging
from dataclasses import dataclass, field

from .constants import (
    REG_ERROR_STATUS, REG_CLEAR_ERROR, REG_GAIN_CONTROL,
    REG_SOFTWARE_RESET, REG_MASTER_RESET, DATA_SWRESET_SPI,
    ERR_PARITY, ERR_DSPAHI, ERR_DSPALO, ERR_SESSION_MASK,
    ERR_HARDWARE_MASK, ERR_ADVISORY_MASK, ERROR_NAMES, WRITE_DATA_MASK,
)
from .utils.stats import FaultStats

logger = logging.getLogger(__name__)


def describe_status(status: int) -> list[str]:
    """Names of the error bits set in a status word, lowest bit first."""
    return [name for bit, name in sorted(ERROR_NAMES.items()) if status & bit]


@dataclass
class FaultReport:
    """Outcome of one handle_faults() call."""

    status:              int  = 0
    residual:            int  = 0
    gain_step:           int  = 0      # -1, 0 or +1
    reset_issued:        bool = False
    master_reset_issued: bool = False
    advisories:          list[str] = field(default_factory=list)
    hardware_warnings:   list[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.residual == 0


@dataclass
class FaultState:
    sticky_status: int = 0
    last_report:   FaultReport | None = None


class FaultManager:
    """
    Applies the corrective protocol for sensor-reported errors.

    Parameters
    ----------
    engine : TransactionEngine
        Register access used for every status read and corrective write.
    reset_on_persistent_fault : bool
        Issue a master reset when errors survive the clear.
    stats : FaultStats | None
        Counters to update (a fresh FaultStats by default).
    """

    def __init__(self, engine, *, reset_on_persistent_fault: bool = False, stats=None):
        self._engine = engine
        self.reset_on_persistent_fault = reset_on_persistent_fault
        self.state = FaultState()
        self.stats = stats if stats is not None else FaultStats()

    @property
    def sticky_status(self) -> int:
        return self.state.sticky_status

    @property
    def last_report(self) -> FaultReport | None:
        return self.state.last_report

    def clear_sticky(self) -> None:
        self.state.sticky_status = 0

    def poll(self) -> int:
        """
        Reads REG_ERROR_STATUS without acting on it.

        The status is merged into the sticky status. A read with a parity
        error is reported as ERR_PARITY.
        """
        result = self._engine.read(REG_ERROR_STATUS)
        status = result.payload if result.parity_ok else ERR_PARITY
        self.state.sticky_status |= status
        return status

    def handle_faults(self) -> int:
        """
        Runs one fault-handling cycle.

        Returns
        -------
        int
            Residual status after the clear (0 = fully resolved). If the
            cycle stops on a parity fault, the status read is returned
            unchanged and nothing is cleared.
        """
        report = FaultReport()
        self.state.last_report = report

        result = self._engine.read(REG_ERROR_STATUS)
        if not result.parity_ok:
            # The status word itself is suspect, do not act on it
            report.status = report.residual = ERR_PARITY
            self.state.sticky_status |= ERR_PARITY
            self.stats.add("ERR_PARITY", corrected=False)
            logger.warning("Parity error reading REG_ERROR_STATUS, no corrective action")
            return report.residual

        status = result.payload
        report.status = status
        if not status:
            return 0

        self.state.sticky_status |= status
        logger.warning("AS5050 error status 0x%03X: %s", status, ", ".join(describe_status(status)))

        if status & ERR_PARITY:
            report.residual = status
            self.stats.add("ERR_PARITY", corrected=False)
            return status

        if status & ERR_DSPAHI:
            self._nudge_gain(report, -1)
        elif status & ERR_DSPALO:
            self._nudge_gain(report, +1)

        if status & ERR_SESSION_MASK:
            self._engine.write(REG_SOFTWARE_RESET, DATA_SWRESET_SPI)
            report.reset_issued = True
            for name in describe_status(status & ERR_SESSION_MASK):
                self.stats.add(name, corrected=True)
            logger.warning("Software reset issued, angle tracking must warm up again")

        report.advisories = describe_status(status & ERR_ADVISORY_MASK)
        report.hardware_warnings = describe_status(status & ERR_HARDWARE_MASK)
        for name in report.advisories:
            self.stats.add(name, corrected=False)

        cleared = self._engine.read(REG_CLEAR_ERROR)
        report.residual = cleared.payload if cleared.parity_ok else ERR_PARITY
        if report.residual and self.reset_on_persistent_fault:
            self._engine.write(REG_MASTER_RESET, 0)
            report.master_reset_issued = True
            report.reset_issued = True
            logger.warning("Errors persist after clear (0x%03X), master reset issued", report.residual)

        if report.residual:
            self.state.sticky_status |= report.residual
        else:
            self.state.sticky_status = 0
        return report.residual

    def _nudge_gain(self, report: FaultReport, step: int) -> None:
        name = "ERR_DSPAHI" if step < 0 else "ERR_DSPALO"
        gain = self._engine.read(REG_GAIN_CONTROL)
        if not gain.parity_ok:
            self.stats.add(name, corrected=False)
            logger.warning("Parity error reading REG_GAIN_CONTROL, gain left unchanged")
            return
        self._engine.write(REG_GAIN_CONTROL, (gain.payload + step) & WRITE_DATA_MASK)
        report.gain_step = step
        self.stats.add(name, corrected=True)
        logger.info("Gain %d -> %d", gain.payload, (gain.payload + step) & WRITE_DATA_MASK)
