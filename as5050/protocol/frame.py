"""
frame.py – Building and parsing AS5050 frames
=============================================
All frames are 16-bit words sent MSB first. There are three outbound
kinds and one response layout:

1. COMMAND (read or write-address)
   ┌────────┬──────────────────────┬────────┐
   │  [15]  │       [14..1]        │  [0]   │
   │  R/W   │   ADDRESS <13:0>     │ PARITY │
   └────────┴──────────────────────┴────────┘
   R/W = 1 for a read, 0 for a write.

2. WRITE DATA
   ┌──────────────────────┬────────┬────────┐
   │       [15..2]        │  [1]   │  [0]   │
   │     DATA <13:0>      │   0    │ PARITY │
   └──────────────────────┴────────┴────────┘

3. NOP (0x0000) – clocks out the response to the previous command.

RESPONSE
   ┌──────────┬──────┬──────┬─────────────┬──────┬────────┐
   │ [15..14] │ [13] │ [12] │   [11..2]   │ [1]  │  [0]   │
   │    –     │  AH  │  AL  │ ANGLE <9:0> │  EF  │ PARITY │
   └──────────┴──────┴──────┴─────────────┴──────┴────────┘
   For registers other than REG_ANGLE bits 13..2 are a 12-bit payload.

Parity is even over the whole word (see parity.py).
"""

from dataclasses import dataclass

from ..constants import (
    READ_BIT, ADDRESS_MASK, WRITE_DATA_MASK, WORD_MASK,
    RES_ERROR_FLAG, PAYLOAD_MASK, ANGLE_MASK,
    PAYLOAD_ALARM_HI, PAYLOAD_ALARM_LO, REG_NOP,
)
from .parity import with_parity, verify_parity


NOP_FRAME = REG_NOP   # all zeros, parity already even


@dataclass(frozen=True)
class TransactionResult:
    """Decoded response of a single read or write transaction."""

    payload:        int
    parity_ok:      bool
    error_flag_set: bool
    alarm_high:     bool = False
    alarm_low:      bool = False
    raw:            int  = 0

    def __repr__(self) -> str:
        flags = []
        if not self.parity_ok:
            flags.append("PARITY")
        if self.error_flag_set:
            flags.append("EF")
        if self.alarm_high:
            flags.append("AH")
        if self.alarm_low:
            flags.append("AL")
        return (
            f"TransactionResult(payload=0x{self.payload:03X}, "
            f"raw=0x{self.raw:04X}, flags={'|'.join(flags) or '-'})"
        )


# ---------------------------------------------------------------------------
# Outbound frames
# ---------------------------------------------------------------------------

def encode_read_frame(address: int) -> int:
    """
    Builds a read command for a register.

    Parameters
    ----------
    address : int
        14-bit register address (range checking is done by the engine).

    Returns
    -------
    int
        16-bit frame with the R/W bit set and even parity.
    """
    return with_parity(READ_BIT | ((address & ADDRESS_MASK) << 1))


def encode_write_address_frame(address: int) -> int:
    """Builds the first frame of a write: the address with R/W cleared."""
    return with_parity((address & ADDRESS_MASK) << 1)


def encode_write_data_frame(data: int) -> int:
    """
    Builds the second frame of a write: the data shifted past the
    don't-care and parity slots.
    """
    return with_parity((data & WRITE_DATA_MASK) << 2)


def decode_command_frame(word: int) -> tuple[bool, int]:
    """
    Parses an outbound command frame.

    Returns
    -------
    (is_read: bool, address: int)
    """
    return bool(word & READ_BIT), (word >> 1) & ADDRESS_MASK


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

def decode_response(word: int, angle: bool = False) -> TransactionResult:
    """
    Decodes a response frame clocked out by the sensor.

    Parameters
    ----------
    word : int
        16-bit response frame.
    angle : bool
        True if the frame answers a REG_ANGLE read. The payload is then
        the 10-bit angle and the two bits above it are alarm flags.

    Returns
    -------
    TransactionResult
        parity_ok is False on a parity mismatch; nothing is raised.
    """
    word &= WORD_MASK
    payload = (word >> 2) & PAYLOAD_MASK
    if angle:
        return TransactionResult(
            payload=payload & ANGLE_MASK,
            parity_ok=verify_parity(word),
            error_flag_set=bool(word & RES_ERROR_FLAG),
            alarm_high=bool(payload & PAYLOAD_ALARM_HI),
            alarm_low=bool(payload & PAYLOAD_ALARM_LO),
            raw=word,
        )
    return TransactionResult(
        payload=payload,
        parity_ok=verify_parity(word),
        error_flag_set=bool(word & RES_ERROR_FLAG),
        raw=word,
    )
