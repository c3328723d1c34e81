"""
log.py – Logging of SPI word exchanges (MOSI / MISO)
=====================================================
CommunicationLog collects every 16-bit exchange of a session (one or
more register transactions) and prints them in a readable form.

Used for debugging: pass it to TransactionEngine (or AS5050(log=...))
and every exchange issued through core.bus.exchange is recorded.
"""

from ..protocol.frame import decode_command_frame
from ..protocol.parity import verify_parity
from ..constants import REG_NAMES


class CommunicationLog:
    """
    Container of SPI exchanges with a printable communication flow.

    Example:
        log = CommunicationLog()
        sensor = AS5050(log=log)
        sensor.angle()
        log.print_flow()
    """

    def __init__(self, maxlen: int | None = None):
        self._entries: list[dict] = []
        self.maxlen = maxlen

    def add(self, step: str, mosi: int, miso: int) -> None:
        """
        Adds an entry.

        Parameters
        ----------
        step : str
            Step description (e.g. "1. READ REG_ANGLE → sensor").
        mosi : int
            Word sent by the host.
        miso : int
            Word received from the sensor.
        """
        self._entries.append({
            "step": step,
            "mosi": mosi & 0xFFFF,
            "miso": miso & 0xFFFF,
        })
        if self.maxlen is not None and len(self._entries) > self.maxlen:
            del self._entries[0]

    def clear(self) -> None:
        """Removes all entries."""
        self._entries.clear()

    @staticmethod
    def _annotate(mosi: int) -> str:
        is_read, address = decode_command_frame(mosi)
        name = REG_NAMES.get(address)
        if name is None:
            return ""
        return f"  ({'R' if is_read else 'W'} {name})"

    def print_flow(self, printer=print) -> None:
        """
        Prints a readable dump of the whole exchange.

        Parameters
        ----------
        printer : callable
            Print function (default print).
        """
        printer("\n" + "╔" + "═" * 68 + "╗")
        printer("║" + " " * 24 + "SPI EXCHANGE FLOW" + " " * 27 + "║")
        printer("╚" + "═" * 68 + "╝")

        for i, entry in enumerate(self._entries, 1):
            parity = "" if verify_parity(entry["miso"]) else "  !! PARITY"
            printer(f"\n{'─' * 70}")
            printer(f"  Step {i}: {entry['step']}")
            printer(f"{'─' * 70}")
            printer(f"  MOSI (host→sensor): 0x{entry['mosi']:04X}{self._annotate(entry['mosi'])}")
            printer(f"  MISO (sensor→host): 0x{entry['miso']:04X}{parity}")

        printer("\n" + "=" * 70 + "\n")

    def to_list(self) -> list[dict]:
        """Returns a copy of the entry list."""
        return [dict(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"CommunicationLog({len(self._entries)} entries)"
