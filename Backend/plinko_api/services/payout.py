from typing import Dict, List, Sequence

from plinko_api.services.board import check_rows
from plinko_api.services.errors import ValidationError

# Multipliers by distance from the center bin (medium risk).
DEFAULT_PAYTABLES: Dict[int, List[float]] = {
    8: [0.4, 0.7, 1.3, 3.0, 13.0],
    12: [0.3, 0.6, 1.1, 2.0, 4.0, 11.0, 33.0],
    16: [0.3, 0.5, 1.0, 1.5, 3.0, 5.0, 10.0, 41.0, 110.0],
}


def bin_distance(final_bin: int, rows: int) -> int:
    # |bin - rows/2| for even rows; odd rows pair the two central bins
    return abs(2 * final_bin - rows) // 2


class PayoutTable:
    """Symmetric multiplier curve, non-decreasing away from the center."""

    def __init__(self, multipliers: Sequence[float]):
        values = [float(m) for m in multipliers]
        if not values:
            raise ValidationError("paytable", "needs at least one multiplier")
        if any(m < 0 for m in values):
            raise ValidationError("paytable", "multipliers must be non-negative")
        if any(b < a for a, b in zip(values, values[1:])):
            raise ValidationError(
                "paytable", "multipliers must not decrease away from the center"
            )
        self.multipliers = tuple(values)

    def __repr__(self):
        return f"PayoutTable({list(self.multipliers)!r})"

    def __eq__(self, other):
        if not isinstance(other, PayoutTable):
            return NotImplemented
        return self.multipliers == other.multipliers

    def supports(self, rows: int) -> bool:
        return rows // 2 + 1 == len(self.multipliers)

    def _check(self, rows: int) -> None:
        check_rows(rows)
        if not self.supports(rows):
            raise ValidationError(
                "paytable",
                f"{len(self.multipliers)} multipliers do not fit a {rows}-row board",
            )

    def resolve(self, final_bin: int, rows: int) -> float:
        self._check(rows)
        if isinstance(final_bin, bool) or not isinstance(final_bin, int):
            raise ValidationError("bin", "expected an integer")
        if not 0 <= final_bin <= rows:
            raise ValidationError("bin", f"must be between 0 and {rows}")
        return self.multipliers[bin_distance(final_bin, rows)]

    def bin_multipliers(self, rows: int) -> List[float]:
        self._check(rows)
        return [self.multipliers[bin_distance(b, rows)] for b in range(rows + 1)]


def default_paytable(rows: int) -> PayoutTable:
    check_rows(rows)
    if rows not in DEFAULT_PAYTABLES:
        raise ValidationError("paytable", f"no default payout table for {rows} rows")
    return PayoutTable(DEFAULT_PAYTABLES[rows])
