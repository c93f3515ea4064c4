"""Board generation and the ball's walk through it.

Both phases draw from the same generator: every peg bias first, in row-major
order, then one decision per row. The board is fixed before the drop column
is looked at, so it cannot be shaped around the player's move.
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from plinko_api.services.errors import ValidationError
from plinko_api.services.fairness import sha256_hex
from plinko_api.services.rng import XorShift32

MAX_ROWS = 32
BIAS_SPREAD = 0.2
BIAS_DECIMALS = 6
COLUMN_STEP = 0.01

PegMap = Tuple[Tuple[float, ...], ...]


class Direction(str, Enum):
    LEFT = "L"
    RIGHT = "R"


@dataclass(frozen=True)
class Outcome:
    path: Tuple[Direction, ...]
    right_moves: int

    @property
    def final_bin(self) -> int:
        return self.right_moves

    def path_string(self) -> str:
        return "".join(d.value for d in self.path)


def check_rows(rows) -> int:
    if isinstance(rows, bool) or not isinstance(rows, int):
        raise ValidationError("rows", f"expected an integer, got {type(rows).__name__}")
    if not 1 <= rows <= MAX_ROWS:
        raise ValidationError("rows", f"must be between 1 and {MAX_ROWS}")
    return rows


def center_column(rows: int) -> int:
    return rows // 2


def check_drop_column(drop_column, rows: int) -> int:
    if isinstance(drop_column, bool) or not isinstance(drop_column, int):
        raise ValidationError(
            "drop_column", f"expected an integer, got {type(drop_column).__name__}"
        )
    if not 0 <= drop_column <= rows:
        raise ValidationError("drop_column", f"must be between 0 and {rows}")
    return drop_column


def peg_bias(x: float) -> float:
    # the rounded value is canonical: it is what gets compared and published
    return round(0.5 + (x - 0.5) * BIAS_SPREAD, BIAS_DECIMALS)


def generate_peg_map(rng: XorShift32, rows: int) -> PegMap:
    """Row ``r`` holds ``r + 1`` peg biases, each in [0.4, 0.6]."""
    check_rows(rows)
    return tuple(
        tuple(peg_bias(rng.next()) for _ in range(r + 1)) for r in range(rows)
    )


def peg_map_hash(peg_map: Sequence[Sequence[float]]) -> str:
    """SHA-256 of the compact JSON rendering, e.g. ``[[0.422123],[0.55,0.41]]``."""
    payload = json.dumps([list(row) for row in peg_map], separators=(",", ":"))
    return sha256_hex(payload)


def simulate(rng: XorShift32, peg_map: PegMap, drop_column: int) -> Outcome:
    """Drop the ball, continuing the generator used to build ``peg_map``.

    At each row the ball meets the peg under its current position (the
    number of right moves so far). The drop column shifts every threshold
    by one hundredth per column away from center.
    """
    rows = len(peg_map)
    check_rows(rows)
    check_drop_column(drop_column, rows)
    for r, row in enumerate(peg_map):
        if len(row) != r + 1:
            raise ValidationError("peg_map", f"row {r} has {len(row)} pegs, expected {r + 1}")

    adj = (drop_column - center_column(rows)) * COLUMN_STEP
    path = []
    right_moves = 0
    for row in peg_map:
        threshold = min(1.0, max(0.0, row[right_moves] + adj))
        if rng.next() < threshold:
            path.append(Direction.LEFT)
        else:
            path.append(Direction.RIGHT)
            right_moves += 1
    return Outcome(path=tuple(path), right_moves=right_moves)
