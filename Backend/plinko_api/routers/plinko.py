from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from plinko_api.deps.settings import Settings, get_settings, paytable_for
from plinko_api.services import ValidationError, evaluate, verify

router = APIRouter(prefix="/plinko", tags=["plinko"])


class VerifyOut(BaseModel):
    commit_hex: str
    combined_seed: str
    peg_map: List[List[float]]
    peg_map_hash: str
    rows: int
    drop_column: int
    path: List[str]
    bin_index: int
    payout_multiplier: float
    ok: Optional[bool] = None
    reason: Optional[str] = None


class PaytableOut(BaseModel):
    rows: int
    multipliers: List[float]


@router.get("/verify", response_model=VerifyOut)
def verify_round(
    server_seed: str,
    client_seed: str,
    nonce: int,
    drop_column: int,
    rows: Optional[int] = None,
    commit_hex: Optional[str] = None,
    claimed_bin: Optional[int] = Query(default=None, alias="bin"),
    settings: Settings = Depends(get_settings),
):
    """Recompute a round from revealed seeds; anyone can call this."""
    if (commit_hex is None) != (claimed_bin is None):
        raise HTTPException(422, "commit_hex and bin must be given together")
    rows = settings.rows if rows is None else rows
    try:
        outcome = evaluate(
            server_seed,
            client_seed,
            nonce,
            drop_column,
            rows=rows,
            paytable=paytable_for(rows, settings),
        )
        result = None
        if commit_hex is not None:
            result = verify(server_seed, client_seed, nonce, drop_column, commit_hex, claimed_bin, rows=rows)
    except ValidationError as e:
        raise HTTPException(400, str(e)) from e

    return VerifyOut(
        commit_hex=outcome.commit_hex,
        combined_seed=outcome.combined_seed,
        peg_map=[list(row) for row in outcome.peg_map],
        peg_map_hash=outcome.peg_map_hash,
        rows=outcome.rows,
        drop_column=drop_column,
        path=[d.value for d in outcome.path],
        bin_index=outcome.final_bin,
        payout_multiplier=outcome.multiplier,
        ok=None if result is None else result.ok,
        reason=None if result is None or result.reason is None else result.reason.value,
    )


@router.get("/paytable", response_model=PaytableOut)
def get_paytable(rows: Optional[int] = None, settings: Settings = Depends(get_settings)):
    rows = settings.rows if rows is None else rows
    try:
        return PaytableOut(rows=rows, multipliers=paytable_for(rows, settings).bin_multipliers(rows))
    except ValidationError as e:
        raise HTTPException(400, str(e)) from e
