"""
Tests for environment-driven configuration.
"""

import pytest

from plinko_api.deps.settings import Settings, load_settings, parse_paytable, paytable_for
from plinko_api.services import PayoutTable, ValidationError, default_paytable


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("PLINKO_ROWS", "PLINKO_PAYTABLE", "DB_DSN"):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings()
        assert settings.rows == 12
        assert settings.paytable == default_paytable(12)
        assert settings.db_dsn is None

    def test_rows_from_env(self, monkeypatch):
        monkeypatch.setenv("PLINKO_ROWS", "8")
        monkeypatch.setenv("DB_DSN", "DRIVER={ODBC Driver 18 for SQL Server};SERVER=db")
        settings = load_settings()
        assert settings.rows == 8
        assert settings.paytable == default_paytable(8)
        assert settings.db_dsn.startswith("DRIVER=")

    def test_custom_paytable(self, monkeypatch):
        monkeypatch.setenv("PLINKO_ROWS", "4")
        monkeypatch.setenv("PLINKO_PAYTABLE", "0.5, 1.5, 9")
        assert load_settings().paytable == PayoutTable([0.5, 1.5, 9.0])

    def test_paytable_size_mismatch(self, monkeypatch):
        monkeypatch.setenv("PLINKO_PAYTABLE", "1,2,3")
        with pytest.raises(ValueError):
            load_settings()

    def test_rows_without_default_table(self, monkeypatch):
        monkeypatch.setenv("PLINKO_ROWS", "10")
        with pytest.raises(ValidationError):
            load_settings()


class TestParsePaytable:
    def test_parse(self):
        assert parse_paytable("1,2,,3").multipliers == (1.0, 2.0, 3.0)

    def test_not_numbers(self):
        with pytest.raises(ValueError):
            parse_paytable("1,two,3")

    def test_decreasing(self):
        with pytest.raises(ValidationError):
            parse_paytable("3,2,1")


class TestPaytableFor:
    def test_configured_table_when_it_fits(self):
        custom = PayoutTable([1, 2, 3, 4, 5, 6, 7])
        settings = Settings(db_dsn=None, rows=12, paytable=custom)
        assert paytable_for(12, settings) is custom

    def test_default_for_other_rows(self):
        settings = Settings(db_dsn=None, rows=8, paytable=default_paytable(8))
        assert paytable_for(12, settings) == default_paytable(12)

    def test_no_table_for_rows(self):
        settings = Settings(db_dsn=None, rows=12, paytable=default_paytable(12))
        with pytest.raises(ValidationError):
            paytable_for(10, settings)
