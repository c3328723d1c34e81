"""
bus.py – Single framed exchange on the sensor bus
==================================================
The protocol layer only needs three operations from a transport:

  select()              – assert chip select (CS LOW)
  transfer_word(word)   – full-duplex 16-bit transfer, MSB first
  deselect()            – release chip select (CS HIGH)

SPITransport (transport.py) implements them on a Raspberry Pi; tests
inject an in-memory sensor model with the same methods.
"""

from typing import Protocol


class Transport(Protocol):
    def select(self) -> None: ...

    def deselect(self) -> None: ...

    def transfer_word(self, word: int) -> int: ...


def exchange(transport: Transport, word: int, log=None, step: str = "") -> int:
    """
    Performs one framed 16-bit exchange.

    Sequence:
      select → transfer_word(word) → deselect

    Parameters
    ----------
    transport : Transport
        Object providing select / transfer_word / deselect.
    word : int
        Frame to send (MOSI).
    log : CommunicationLog | None
        If given, the exchange is recorded.
    step : str
        Step description shown in the log.

    Returns
    -------
    int
        Frame received from the sensor (MISO).
    """
    transport.select()
    try:
        resp = transport.transfer_word(word & 0xFFFF)
    finally:
        transport.deselect()
    if log is not None:
        log.add(step, word, resp)
    return resp
