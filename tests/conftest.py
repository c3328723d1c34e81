"""Shared fixtures: an in-memory AS5050 that answers on the word level."""

from __future__ import annotations

import pytest

from as5050.constants import (
    READ_BIT, ADDRESS_MASK, RES_PARITY, RES_ERROR_FLAG, PAYLOAD_MASK,
    REG_NOP, REG_ANGLE, REG_GAIN_CONTROL, REG_ERROR_STATUS, REG_CLEAR_ERROR,
    REG_SOFTWARE_RESET, REG_MASTER_RESET, PAYLOAD_ALARM_HI, PAYLOAD_ALARM_LO,
)
from as5050.protocol.parity import with_parity


def response_frame(payload: int, error_flag: bool = False, corrupt: bool = False) -> int:
    word = (payload & PAYLOAD_MASK) << 2
    if error_flag:
        word |= RES_ERROR_FLAG
    word = with_parity(word)
    if corrupt:
        word ^= RES_PARITY
    return word


class FakeAS5050:
    """Word-level model of the sensor.

    The reply to a command is clocked out during the *next* exchange,
    like on the real chip. Angle reads consume ``angles`` one by one and
    repeat the last value once the list is exhausted.
    """

    def __init__(self, angles=(0,), error_status=0, gain=32, residual=0):
        self.angles = list(angles)
        self.error_status = error_status
        self.residual = residual
        self.gain = gain
        self.alarm_high = False
        self.alarm_low = False
        self.corrupt_angle_reads: set[int] = set()
        self.corrupt_registers: set[int] = set()

        self.angle_reads = 0
        self.mosi: list[int] = []
        self.selects = 0
        self.deselects = 0
        self.selected = False
        self.closed = False
        self.reads: list[int] = []
        self.writes: list[tuple[int, int]] = []

        self._pending = 0
        self._write_target = None

    # -- transport interface ------------------------------------------------

    def select(self) -> None:
        assert not self.selected, "nested select"
        self.selected = True
        self.selects += 1

    def deselect(self) -> None:
        assert self.selected, "deselect without select"
        self.selected = False
        self.deselects += 1

    def transfer_word(self, word: int) -> int:
        assert self.selected, "transfer outside select/deselect"
        self.mosi.append(word)
        out = self._pending
        self._pending = self._respond(word)
        return out

    def close(self) -> None:
        self.closed = True

    # -- sensor model ---------------------------------------------------------

    def _ef(self) -> bool:
        return self.error_status != 0

    def _respond(self, word: int) -> int:
        if self._write_target is not None:
            address, self._write_target = self._write_target, None
            data = word >> 2
            self.writes.append((address, data))
            self._apply_write(address, data)
            return response_frame(self._register(address), self._ef())

        address = (word >> 1) & ADDRESS_MASK
        if word & READ_BIT:
            self.reads.append(address)
            return self._read(address)
        if address == REG_NOP:
            return response_frame(0, self._ef())
        self._write_target = address
        return response_frame(0, self._ef())

    def _register(self, address: int) -> int:
        if address == REG_GAIN_CONTROL:
            return self.gain
        if address == REG_ERROR_STATUS:
            return self.error_status
        return 0

    def _read(self, address: int) -> int:
        corrupt = address in self.corrupt_registers
        if address == REG_ANGLE:
            index = self.angle_reads
            self.angle_reads += 1
            if self.angles:
                angle = self.angles[min(index, len(self.angles) - 1)]
            else:
                angle = 0
            payload = angle
            if self.alarm_high:
                payload |= PAYLOAD_ALARM_HI
            if self.alarm_low:
                payload |= PAYLOAD_ALARM_LO
            return response_frame(payload, self._ef(), corrupt or index in self.corrupt_angle_reads)
        if address == REG_CLEAR_ERROR:
            self.error_status = self.residual
            return response_frame(self.error_status, self._ef(), corrupt)
        return response_frame(self._register(address), self._ef(), corrupt)

    def _apply_write(self, address: int, data: int) -> None:
        if address == REG_GAIN_CONTROL:
            self.gain = data
        elif address in (REG_SOFTWARE_RESET, REG_MASTER_RESET):
            self.error_status = self.residual

    # -- helpers for assertions ---------------------------------------------

    def count_reads(self, address: int) -> int:
        return self.reads.count(address)

    def writes_to(self, address: int) -> list[int]:
        return [data for addr, data in self.writes if addr == address]


@pytest.fixture
def fake():
    return FakeAS5050()
