"""Progress computation helpers."""
from dataclasses import dataclass


def fraction(completed: int, total: int) -> float:
    """
    Fraction of ``total`` already transferred, clamped to [0, 1].

    A zero-length transfer is complete from the start, so ``total <= 0``
    reports 1.0.
    """
    if total <= 0:
        return 1.0
    value = completed / total
    return min(max(value, 0.0), 1.0)


@dataclass
class TransferProgress:
    """Progress information for a single transfer."""
    bytes_uploaded: int = 0
    total_bytes: int = 0

    @property
    def fraction(self) -> float:
        return fraction(self.bytes_uploaded, self.total_bytes)

    @property
    def percent(self) -> float:
        return self.fraction * 100.0
