"""Round evaluation and third-party verification.

``evaluate`` is what the service runs when a round starts; ``verify`` re-runs
the same pipeline from revealed seeds and compares it against the published
claims. Both are pure: every call owns its own generator.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from plinko_api.services.board import (
    Direction,
    Outcome,
    PegMap,
    check_drop_column,
    check_rows,
    generate_peg_map,
    peg_map_hash,
    simulate,
)
from plinko_api.services.errors import ValidationError
from plinko_api.services.fairness import check_nonce, check_seed, combine, commit
from plinko_api.services.payout import PayoutTable, default_paytable
from plinko_api.services.rng import XorShift32

DEFAULT_ROWS = 12


class MismatchReason(str, Enum):
    COMMIT = "commit-mismatch"
    OUTCOME = "outcome-mismatch"


@dataclass(frozen=True)
class RoundOutcome:
    commit_hex: str
    combined_seed: str
    peg_map: PegMap
    peg_map_hash: str
    path: Tuple[Direction, ...]
    final_bin: int
    multiplier: float

    @property
    def rows(self) -> int:
        return len(self.peg_map)


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    recomputed_commit_hex: str
    recomputed_combined_seed: str
    recomputed_bin: int
    reason: Optional[MismatchReason] = None


def _check_inputs(server_seed, client_seed, nonce, drop_column, rows):
    check_seed("server_seed", server_seed)
    check_seed("client_seed", client_seed)
    check_nonce(nonce)
    check_rows(rows)
    check_drop_column(drop_column, rows)


def _drop(combined_seed: str, drop_column: int, rows: int) -> Tuple[PegMap, Outcome]:
    rng = XorShift32.from_seed_hex(combined_seed)
    peg_map = generate_peg_map(rng, rows)
    return peg_map, simulate(rng, peg_map, drop_column)


def evaluate(
    server_seed: str,
    client_seed: str,
    nonce: int,
    drop_column: int,
    rows: int = DEFAULT_ROWS,
    paytable: Optional[PayoutTable] = None,
) -> RoundOutcome:
    _check_inputs(server_seed, client_seed, nonce, drop_column, rows)
    if paytable is None:
        paytable = default_paytable(rows)
    elif not paytable.supports(rows):
        raise ValidationError(
            "paytable", f"{len(paytable.multipliers)} multipliers do not fit a {rows}-row board"
        )

    combined_seed = combine(server_seed, client_seed, nonce)
    peg_map, outcome = _drop(combined_seed, drop_column, rows)
    return RoundOutcome(
        commit_hex=commit(server_seed, nonce),
        combined_seed=combined_seed,
        peg_map=peg_map,
        peg_map_hash=peg_map_hash(peg_map),
        path=outcome.path,
        final_bin=outcome.final_bin,
        multiplier=paytable.resolve(outcome.final_bin, rows),
    )


def verify(
    server_seed: str,
    client_seed: str,
    nonce: int,
    drop_column: int,
    claimed_commit_hex: str,
    claimed_bin: int,
    rows: int = DEFAULT_ROWS,
) -> VerificationResult:
    """Recompute a revealed round and compare it with what was published.

    A mismatch is reported through ``ok``/``reason`` rather than raised; a
    broken commitment is reported ahead of a wrong bin. Malformed inputs
    still raise :class:`ValidationError`.
    """
    _check_inputs(server_seed, client_seed, nonce, drop_column, rows)
    check_seed("claimed_commit_hex", claimed_commit_hex)
    if isinstance(claimed_bin, bool) or not isinstance(claimed_bin, int):
        raise ValidationError("claimed_bin", "expected an integer")

    commit_hex = commit(server_seed, nonce)
    combined_seed = combine(server_seed, client_seed, nonce)
    _, outcome = _drop(combined_seed, drop_column, rows)

    reason = None
    if commit_hex != claimed_commit_hex.strip().lower():
        reason = MismatchReason.COMMIT
    elif outcome.final_bin != claimed_bin:
        reason = MismatchReason.OUTCOME
    return VerificationResult(
        ok=reason is None,
        recomputed_commit_hex=commit_hex,
        recomputed_combined_seed=combined_seed,
        recomputed_bin=outcome.final_bin,
        reason=reason,
    )
