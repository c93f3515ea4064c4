import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from plinko_api.deps.db import CREATED, REVEALED, STARTED, RoundRecord, RoundStore, get_store
from plinko_api.deps.settings import Settings, get_settings, paytable_for
from plinko_api.services import ValidationError, commit, evaluate, generate_server_seed

router = APIRouter(prefix="/rounds", tags=["rounds"])
logger = logging.getLogger(__name__)


class CommitOut(BaseModel):
    round_id: int
    nonce: int
    commit_hex: str
    rows: int


class StartIn(BaseModel):
    client_seed: str = Field(min_length=1, max_length=256)
    drop_column: int
    bet_cents: int = Field(default=0, ge=0)


class StartOut(BaseModel):
    round_id: int
    nonce: int
    commit_hex: str
    combined_seed: str
    peg_map_hash: str
    rows: int
    drop_column: int
    path: List[str]
    bin_index: int
    payout_multiplier: float


class RoundOut(BaseModel):
    round_id: int
    status: str
    nonce: int
    commit_hex: str
    rows: int
    server_seed: Optional[str] = None
    client_seed: Optional[str] = None
    combined_seed: Optional[str] = None
    peg_map_hash: Optional[str] = None
    drop_column: Optional[int] = None
    path: Optional[List[str]] = None
    bin_index: Optional[int] = None
    payout_multiplier: Optional[float] = None
    bet_cents: Optional[int] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    revealed_at: Optional[datetime] = None


def round_out(r: RoundRecord) -> RoundOut:
    return RoundOut(
        round_id=r.id,
        status=r.status,
        nonce=r.nonce,
        commit_hex=r.commit_hex,
        rows=r.rows,
        # the commitment is only worth something while the seed stays hidden
        server_seed=r.server_seed if r.status == REVEALED else None,
        client_seed=r.client_seed,
        combined_seed=r.combined_seed,
        peg_map_hash=r.peg_map_hash,
        drop_column=r.drop_column,
        path=r.path,
        bin_index=r.bin_index,
        payout_multiplier=r.payout_multiplier,
        bet_cents=r.bet_cents,
        created_at=r.created_at,
        started_at=r.started_at,
        revealed_at=r.revealed_at,
    )


def load_round(store: RoundStore, round_id: int) -> RoundRecord:
    r = store.get_round(round_id)
    if r is None:
        raise HTTPException(404, f"Round {round_id} not found")
    return r


@router.post("/commit", response_model=CommitOut)
def commit_round(
    store: RoundStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    nonce = store.next_nonce()
    server_seed = generate_server_seed()
    commit_hex = commit(server_seed, nonce)
    round_id = store.create_round(nonce, server_seed, commit_hex, settings.rows)
    logger.info("round %s committed (nonce=%s commit=%s)", round_id, nonce, commit_hex)
    return CommitOut(round_id=round_id, nonce=nonce, commit_hex=commit_hex, rows=settings.rows)


@router.post("/{round_id}/start", response_model=StartOut)
def start_round(
    round_id: int,
    data: StartIn,
    store: RoundStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    r = load_round(store, round_id)
    if r.status != CREATED:
        raise HTTPException(409, f"Round {round_id} is {r.status}, expected {CREATED}")

    try:
        outcome = evaluate(
            r.server_seed,
            data.client_seed,
            r.nonce,
            data.drop_column,
            rows=r.rows,
            paytable=paytable_for(r.rows, settings),
        )
    except ValidationError as e:
        logger.warning("round %s start rejected: %s", round_id, e)
        raise HTTPException(400, str(e)) from e

    path = [d.value for d in outcome.path]
    started = store.start_round(
        round_id,
        client_seed=data.client_seed,
        combined_seed=outcome.combined_seed,
        peg_map_hash=outcome.peg_map_hash,
        drop_column=data.drop_column,
        bin_index=outcome.final_bin,
        payout_multiplier=outcome.multiplier,
        bet_cents=data.bet_cents,
        path=path,
    )
    if not started:
        raise HTTPException(409, f"Round {round_id} was already started")

    logger.info("round %s started: bin=%s multiplier=%s", round_id, outcome.final_bin, outcome.multiplier)
    return StartOut(
        round_id=round_id,
        nonce=r.nonce,
        commit_hex=r.commit_hex,
        combined_seed=outcome.combined_seed,
        peg_map_hash=outcome.peg_map_hash,
        rows=r.rows,
        drop_column=data.drop_column,
        path=path,
        bin_index=outcome.final_bin,
        payout_multiplier=outcome.multiplier,
    )


@router.post("/{round_id}/reveal", response_model=RoundOut)
def reveal_round(round_id: int, store: RoundStore = Depends(get_store)):
    r = load_round(store, round_id)
    if r.status != STARTED:
        raise HTTPException(409, f"Round {round_id} is {r.status}, expected {STARTED}")
    if not store.reveal_round(round_id):
        raise HTTPException(409, f"Round {round_id} was already revealed")
    logger.info("round %s revealed", round_id)
    return round_out(load_round(store, round_id))


@router.get("/{round_id}", response_model=RoundOut)
def get_round(round_id: int, store: RoundStore = Depends(get_store)):
    return round_out(load_round(store, round_id))


@router.get("", response_model=List[RoundOut])
def list_rounds(
    limit: int = Query(default=20, ge=1, le=100),
    store: RoundStore = Depends(get_store),
):
    return [round_out(r) for r in store.list_rounds(limit)]
