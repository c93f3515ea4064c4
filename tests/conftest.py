"""
Shared fixtures: known seed vectors, an in-memory round store and an API client.
"""

from dataclasses import replace
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from plinko_api.deps.db import CREATED, REVEALED, STARTED, RoundRecord, get_store
from plinko_api.deps.settings import Settings, get_settings
from plinko_api.main import app
from plinko_api.services import default_paytable

SERVER_SEED = "b2a5f3f32a4d9c6ee7a8c1d33456677890abcdeffedcba0987654321ffeeddcc"
CLIENT_SEED = "candidate-hello"
NONCE = 42
COMMIT_HEX = "bb9acdc67f3f18f3345236a01f0e5072596657a9005c7d8a22cff061451a6b34"
COMBINED_SEED = "e1dddf77de27d395ea2be2ed49aa2a59bd6bf12ee8d350c16c008abd406c07e0"


class MemoryRoundStore:
    """Same surface as RoundStore, kept in a dict."""

    def __init__(self, first_nonce: int = 1):
        self.rounds = {}
        self._nonce = first_nonce
        self._next_id = 1

    def next_nonce(self) -> int:
        nonce = self._nonce
        self._nonce += 1
        return nonce

    def create_round(self, nonce, server_seed, commit_hex, rows):
        round_id = self._next_id
        self._next_id += 1
        self.rounds[round_id] = RoundRecord(
            id=round_id,
            status=CREATED,
            nonce=nonce,
            commit_hex=commit_hex,
            server_seed=server_seed,
            rows=rows,
            created_at=datetime.now(timezone.utc),
        )
        return round_id

    def get_round(self, round_id):
        r = self.rounds.get(round_id)
        return None if r is None else replace(r)

    def list_rounds(self, limit):
        ids = sorted(self.rounds, reverse=True)[:limit]
        return [replace(self.rounds[i]) for i in ids]

    def start_round(self, round_id, **fields):
        r = self.rounds.get(round_id)
        if r is None or r.status != CREATED:
            return False
        self.rounds[round_id] = replace(
            r,
            status=STARTED,
            client_seed=fields["client_seed"],
            combined_seed=fields["combined_seed"],
            peg_map_hash=fields["peg_map_hash"],
            drop_column=fields["drop_column"],
            bin_index=fields["bin_index"],
            payout_multiplier=fields["payout_multiplier"],
            bet_cents=fields["bet_cents"],
            path=list(fields["path"]),
            started_at=datetime.now(timezone.utc),
        )
        return True

    def reveal_round(self, round_id):
        r = self.rounds.get(round_id)
        if r is None or r.status != STARTED:
            return False
        self.rounds[round_id] = replace(
            r, status=REVEALED, revealed_at=datetime.now(timezone.utc)
        )
        return True


@pytest.fixture
def settings():
    return Settings(db_dsn=None, rows=12, paytable=default_paytable(12))


@pytest.fixture
def store():
    return MemoryRoundStore()


@pytest.fixture
def client(store, settings):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
