import pytest

from sqlite_doc_engine import Database, Settings, reset_default_database


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    # keep the default database and any .env lookups inside tmp_path
    monkeypatch.chdir(tmp_path)
    for key in ("DOCENGINE_DB_PATH", "DOCENGINE_JOURNAL_MODE", "DOCENGINE_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DOCENGINE_DB_PATH", str(tmp_path / "default.sqlite"))
    yield
    reset_default_database()


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path / "test.sqlite", settings=Settings(journal_mode="WAL"))
    yield database
    database.close()
