import json
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

import pyodbc

from plinko_api.deps.settings import get_settings

CREATED = "CREATED"
STARTED = "STARTED"
REVEALED = "REVEALED"


@contextmanager
def get_conn():
    conn = pyodbc.connect(get_settings().db_dsn, autocommit=False)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def exec_tsql(conn, sql: str, params: tuple = ()):
    cur = conn.cursor()
    cur.execute(sql, params)
    # statements without a result set leave description unset
    if cur.description is None:
        return []
    return cur.fetchall()


ROUND_COLUMNS = """
Id, Status, Nonce, CommitHex, ServerSeed, ClientSeed, CombinedSeed, PegMapHash,
BoardRows, DropColumn, BinIndex, PayoutMultiplier, BetCents, PathJson,
CreatedAt, StartedAt, RevealedAt
"""


@dataclass
class RoundRecord:
    id: int
    status: str
    nonce: int
    commit_hex: str
    server_seed: str
    rows: int
    client_seed: Optional[str] = None
    combined_seed: Optional[str] = None
    peg_map_hash: Optional[str] = None
    drop_column: Optional[int] = None
    bin_index: Optional[int] = None
    payout_multiplier: Optional[float] = None
    bet_cents: Optional[int] = None
    path: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    revealed_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "RoundRecord":
        (id_, status, nonce, commit_hex, server_seed, client_seed, combined_seed,
         peg_map_hash, rows, drop_column, bin_index, multiplier, bet_cents,
         path_json, created_at, started_at, revealed_at) = row
        return cls(
            id=int(id_),
            status=status,
            nonce=int(nonce),
            commit_hex=commit_hex,
            server_seed=server_seed,
            rows=int(rows),
            client_seed=client_seed,
            combined_seed=combined_seed,
            peg_map_hash=peg_map_hash,
            drop_column=drop_column,
            bin_index=bin_index,
            payout_multiplier=None if multiplier is None else float(multiplier),
            bet_cents=bet_cents,
            path=json.loads(path_json) if path_json else None,
            created_at=created_at,
            started_at=started_at,
            revealed_at=revealed_at,
        )


class RoundStore:
    """Round rows in ``dbo.PlinkoRounds``.

    Lifecycle moves are conditional updates: a round only leaves a status
    once, so a seed/nonce pair can never be played twice.
    """

    def __init__(self, connect: Callable = get_conn):
        self._connect = connect

    def next_nonce(self) -> int:
        with self._connect() as conn:
            rows = exec_tsql(conn, "SELECT NEXT VALUE FOR dbo.PlinkoNonce;")
        return int(rows[0][0])

    def create_round(self, nonce: int, server_seed: str, commit_hex: str, rows: int) -> int:
        sql = """
INSERT INTO dbo.PlinkoRounds (Status, Nonce, CommitHex, ServerSeed, BoardRows)
OUTPUT INSERTED.Id
VALUES (?, ?, ?, ?, ?);
"""
        with self._connect() as conn:
            result = exec_tsql(conn, sql, (CREATED, nonce, commit_hex, server_seed, rows))
        return int(result[0][0])

    def get_round(self, round_id: int) -> Optional[RoundRecord]:
        sql = f"SELECT {ROUND_COLUMNS} FROM dbo.PlinkoRounds WHERE Id = ?;"
        with self._connect() as conn:
            rows = exec_tsql(conn, sql, (round_id,))
        return RoundRecord.from_row(rows[0]) if rows else None

    def list_rounds(self, limit: int) -> List[RoundRecord]:
        sql = f"SELECT TOP (?) {ROUND_COLUMNS} FROM dbo.PlinkoRounds ORDER BY Id DESC;"
        with self._connect() as conn:
            rows = exec_tsql(conn, sql, (limit,))
        return [RoundRecord.from_row(r) for r in rows]

    def start_round(
        self,
        round_id: int,
        *,
        client_seed: str,
        combined_seed: str,
        peg_map_hash: str,
        drop_column: int,
        bin_index: int,
        payout_multiplier: float,
        bet_cents: int,
        path: List[str],
    ) -> bool:
        sql = """
UPDATE dbo.PlinkoRounds
SET Status = ?, ClientSeed = ?, CombinedSeed = ?, PegMapHash = ?, DropColumn = ?,
    BinIndex = ?, PayoutMultiplier = ?, BetCents = ?, PathJson = ?,
    StartedAt = SYSUTCDATETIME()
OUTPUT INSERTED.Id
WHERE Id = ? AND Status = ?;
"""
        params = (
            STARTED, client_seed, combined_seed, peg_map_hash, drop_column,
            bin_index, payout_multiplier, bet_cents, json.dumps(path),
            round_id, CREATED,
        )
        with self._connect() as conn:
            return bool(exec_tsql(conn, sql, params))

    def reveal_round(self, round_id: int) -> bool:
        sql = """
UPDATE dbo.PlinkoRounds
SET Status = ?, RevealedAt = SYSUTCDATETIME()
OUTPUT INSERTED.Id
WHERE Id = ? AND Status = ?;
"""
        with self._connect() as conn:
            return bool(exec_tsql(conn, sql, (REVEALED, round_id, STARTED)))


def get_store() -> RoundStore:
    return RoundStore()
