"""
stats.py – Fault counters per error bit
========================================
FaultStats aggregates the faults seen by the fault manager over the
lifetime of a driver and prints a summary table, e.g. at the end of a
test run on the bench.
"""


class FaultStats:
    """
    Fault counters grouped by name.

    Example:
        stats = FaultStats()
        stats.add("ERR_DSPAHI", corrected=True)
        stats.add("ERR_DACOV", corrected=False)
        stats.print_summary()
    """

    def __init__(self):
        self.total     = 0
        self.corrected = 0
        self.reported  = 0
        self._names:   dict[str, dict[str, int]] = {}

    def add(self, name: str, corrected: bool) -> None:
        """
        Records a single occurrence of a fault.

        Parameters
        ----------
        name : str
            Fault name (e.g. "ERR_DSPAHI").
        corrected : bool
            True if a corrective action was issued, False if the fault was
            only reported.
        """
        self.total += 1
        if corrected:
            self.corrected += 1
        else:
            self.reported += 1

        if name not in self._names:
            self._names[name] = {"corrected": 0, "reported": 0}
        self._names[name]["corrected" if corrected else "reported"] += 1

    def count(self, name: str) -> int:
        """Number of occurrences of one fault."""
        r = self._names.get(name)
        return r["corrected"] + r["reported"] if r else 0

    def reset(self) -> None:
        """Zeroes all counters."""
        self.total     = 0
        self.corrected = 0
        self.reported  = 0
        self._names.clear()

    def print_summary(self, printer=print) -> None:
        """
        Prints a summary table.

        Parameters
        ----------
        printer : callable
            Print function (default print).
        """
        printer("\n" + "=" * 70)
        printer("  FAULT SUMMARY")
        printer("=" * 70)
        printer(f"  Total faults : {self.total}")
        printer(f"  Corrected    : {self.corrected}")
        printer(f"  Reported     : {self.reported}")
        printer("\n" + "-" * 70)
        printer(f"  {'Fault':<38} {'Fixed':>6} {'Total':>6}")
        printer("-" * 70)

        for name in sorted(self._names):
            r     = self._names[name]
            total = r["corrected"] + r["reported"]
            printer(f"  {name:<38} {r['corrected']:>6} {total:>6}")

        printer("=" * 70 + "\n")

    @property
    def names(self) -> dict:
        """Returns the per-fault counters (read-only copy)."""
        return {k: dict(v) for k, v in self._names.items()}
