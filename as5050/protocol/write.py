"""
write.py – WRITE path (host → sensor)
======================================
Sequence:

  1. Address   host sends the write frame (R/W = 0) for the register
  2. Data      host sends the data frame
  3. Confirm   host sends NOP; the sensor clocks out the new register
               content as confirmation

Echoes of steps 1 and 2 belong to earlier commands and are discarded.
"""

from ..constants import REG_NAMES
from ..core.bus import exchange
from .frame import (
    NOP_FRAME, TransactionResult,
    encode_write_address_frame, encode_write_data_frame, decode_response,
)


def protocol_write(
    transport,
    register_address: int,
    data: int,
    *,
    log=None,
) -> TransactionResult:
    """
    Performs the full WRITE path.

    Parameters
    ----------
    transport : Transport
        Object providing select / transfer_word / deselect.
    register_address : int
        Address of the register to write.
    data : int
        Value to write (14 bits).
    log : CommunicationLog | None
        Optional exchange log.

    Returns
    -------
    TransactionResult
        Decoded confirmation frame. Parity and error flag are reported,
        not raised.
    """
    name = REG_NAMES.get(register_address, f"0x{register_address:04X}")

    # ------------------------------------------------------------------ #
    # Step 1: address
    # ------------------------------------------------------------------ #
    exchange(transport, encode_write_address_frame(register_address), log, f"1. WRITE {name} → sensor")

    # ------------------------------------------------------------------ #
    # Step 2: data
    # ------------------------------------------------------------------ #
    exchange(transport, encode_write_data_frame(data), log, f"2. DATA 0x{data:04X} → sensor")

    # ------------------------------------------------------------------ #
    # Step 3: NOP, receive the confirmation
    # ------------------------------------------------------------------ #
    resp = exchange(transport, NOP_FRAME, log, "3. NOP, receive confirmation")

    return decode_response(resp)
