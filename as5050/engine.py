"""
engine.py – Transaction engine
===============================
TransactionEngine turns logical register reads and writes into framed
bus exchanges (protocol_read / protocol_write) on one transport. It is
the only place that talks to the transport; the tracker and the fault
manager go through it.
"""

import logging

from .constants import REG_NAMES, WRITE_DATA_MASK
from .protocol.frame import TransactionResult
from .protocol.read import protocol_read
from .protocol.write import protocol_write

logger = logging.getLogger(__name__)


class TransactionEngine:
    """
    Register access on one AS5050.

    Parameters
    ----------
    transport : Transport
        Object providing select / transfer_word / deselect.
    log : CommunicationLog | None
        If given, every exchange is recorded in it.

    Example
    -------
    engine = TransactionEngine(transport)
    result = engine.read(REG_ANGLE)
    if result.parity_ok:
        print(result.payload)
    """

    def __init__(self, transport, log=None):
        self._transport      = transport
        self.log             = log
        self.transactions    = 0
        self.parity_failures = 0

    @property
    def transport(self):
        return self._transport

    @staticmethod
    def _check_address(address: int) -> None:
        if address not in REG_NAMES:
            raise ValueError(f"Unknown AS5050 register 0x{address:04X}")

    def read(self, address: int) -> TransactionResult:
        """
        Reads a register.

        Raises
        ------
        ValueError
            If the address is not part of the register map.
        """
        self._check_address(address)
        result = protocol_read(self._transport, address, log=self.log)
        self._account(address, result)
        return result

    def write(self, address: int, data: int) -> TransactionResult:
        """
        Writes a register and returns the decoded confirmation.

        Raises
        ------
        ValueError
            If the address is unknown or data does not fit in 14 bits.
        """
        self._check_address(address)
        if not 0 <= data <= WRITE_DATA_MASK:
            raise ValueError(f"Register data must be 0-0x{WRITE_DATA_MASK:04X}, got {data}")
        result = protocol_write(self._transport, address, data, log=self.log)
        self._account(address, result)
        return result

    def _account(self, address: int, result: TransactionResult) -> None:
        self.transactions += 1
        if not result.parity_ok:
            self.parity_failures += 1
        logger.debug("%s -> %r", REG_NAMES[address], result)
