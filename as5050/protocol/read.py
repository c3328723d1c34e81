"""
read.py – READ path (sensor → host)
====================================
Sequence:

  1. Command   host sends the read frame for the register;
               the word clocked back answers the previous command
               and is discarded
  2. Fetch     host sends NOP; the sensor clocks out the register
               content requested in step 1

The response lags the command by one exchange, which is why a read
always takes two exchanges.
"""

from ..constants import REG_NAMES, REG_ANGLE
from ..core.bus import exchange
from .frame import (
    NOP_FRAME, TransactionResult,
    encode_read_frame, decode_response,
)


def protocol_read(
    transport,
    register_address: int,
    *,
    angle: bool | None = None,
    log=None,
) -> TransactionResult:
    """
    Performs the full READ path.

    Parameters
    ----------
    transport : Transport
        Object providing select / transfer_word / deselect.
    register_address : int
        Address of the register to read.
    angle : bool | None
        Decode the response with the angle layout (10-bit angle + alarm
        bits). None selects it automatically for REG_ANGLE.
    log : CommunicationLog | None
        Optional exchange log.

    Returns
    -------
    TransactionResult
        Parity and error-flag state of the response. Never raises on a
        corrupted response.
    """
    if angle is None:
        angle = register_address == REG_ANGLE
    name = REG_NAMES.get(register_address, f"0x{register_address:04X}")

    # ------------------------------------------------------------------ #
    # Step 1: read command (echo discarded)
    # ------------------------------------------------------------------ #
    exchange(transport, encode_read_frame(register_address), log, f"1. READ {name} → sensor")

    # ------------------------------------------------------------------ #
    # Step 2: NOP, receive the register content
    # ------------------------------------------------------------------ #
    resp = exchange(transport, NOP_FRAME, log, f"2. NOP, receive {name}")

    return decode_response(resp, angle=angle)
