"""Backfill command entry point tests."""

from datetime import date

import pytest
from sqlalchemy.orm import sessionmaker

from rentledger.cli import backfill as backfill_cli
from rentledger.models import RentPeriod
from rentledger.services.errors import StoreUnavailable


@pytest.fixture
def cli_db(db_session, monkeypatch):
    """Point the command at the test database and keep logging configuration untouched."""
    monkeypatch.setattr("rentledger.services.SessionLocal", sessionmaker(bind=db_session.get_bind()))
    monkeypatch.setattr(backfill_cli, "setup_server_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(backfill_cli, "load_dotenv", lambda: None)
    return db_session


def test_parse_as_of():
    assert backfill_cli.parse_args(["--as-of", "2024-06-30"]).as_of == date(2024, 6, 30)
    assert backfill_cli.parse_args([]).as_of is None


def test_parse_rejects_bad_date():
    with pytest.raises(SystemExit):
        backfill_cli.parse_args(["--as-of", "30/06/2024"])


def test_main_success(cli_db, make_tenant, make_lease):
    make_lease(make_tenant("Alice Moreau"))

    assert backfill_cli.main(["--as-of", "2024-02-15"]) == 0
    assert cli_db.query(RentPeriod).count() == 2


def test_main_reports_store_failure(monkeypatch, cli_db):
    def broken(db, as_of):
        raise StoreUnavailable("database is locked")

    monkeypatch.setattr(backfill_cli, "backfill", broken)

    assert backfill_cli.main(["--as-of", "2024-02-15"]) == 1
