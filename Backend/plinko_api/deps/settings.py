import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from plinko_api.services.payout import PayoutTable, default_paytable

load_dotenv()


@dataclass(frozen=True)
class Settings:
    db_dsn: Optional[str]
    rows: int
    paytable: PayoutTable


def parse_paytable(raw: str) -> PayoutTable:
    """``"0.3, 0.6, 1.1"`` -> multipliers by distance from center."""
    try:
        values = [float(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValueError(f"PLINKO_PAYTABLE is not a list of numbers: {raw!r}") from None
    return PayoutTable(values)


def load_settings() -> Settings:
    rows = int(os.getenv("PLINKO_ROWS", "12"))
    raw_table = os.getenv("PLINKO_PAYTABLE")
    paytable = parse_paytable(raw_table) if raw_table else default_paytable(rows)
    if not paytable.supports(rows):
        raise ValueError(
            f"PLINKO_PAYTABLE needs {rows // 2 + 1} multipliers for {rows} rows"
        )
    return Settings(db_dsn=os.getenv("DB_DSN"), rows=rows, paytable=paytable)


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def paytable_for(rows: int, settings: Settings) -> PayoutTable:
    """Configured table when it fits ``rows``, else the shipped default."""
    if settings.paytable.supports(rows):
        return settings.paytable
    return default_paytable(rows)
