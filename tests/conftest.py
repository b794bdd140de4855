"""
conftest.py
-----------
Shared pytest fixtures for Cyclejournal tests.

The database URI has to be in the environment before cyclejournal is imported, so every test
session runs against its own SQLite file.
"""
import os
import tempfile
from datetime import date
from pathlib import Path

_TEST_DB_DIR = tempfile.mkdtemp(prefix="cyclejournal-tests-")
os.environ["CYCLEJOURNAL_DB_URI"] = f"sqlite:///{Path(_TEST_DB_DIR) / 'cyclejournal.db'}"
os.environ.pop("CYCLEJOURNAL_REDIS_URL", None)

import pytest

from cyclejournal import db
from cyclejournal.journal.models import Base as JournalBase
from cyclejournal.journal.resolver import DayCycleResolver
from cyclejournal.preferences.models import Base as PreferencesBase
from cyclejournal.utils.confparse import load_question_catalog


# ----- Database Fixtures -----

@pytest.fixture
def db_session():
    """Session on freshly created journal tables, dropped after the test."""
    JournalBase.metadata.create_all(db.engine)
    PreferencesBase.metadata.create_all(db.engine)
    session = db.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        JournalBase.metadata.drop_all(db.engine)
        PreferencesBase.metadata.drop_all(db.engine)


# ----- Journal Fixtures -----

@pytest.fixture
def catalog():
    """Bundled question catalog."""
    return load_question_catalog()


@pytest.fixture
def start_date():
    return date(2026, 1, 1)


@pytest.fixture
def day_resolver(start_date, catalog):
    """Resolver with the default question order, starting on 2026-01-01."""
    return DayCycleResolver(start_date, catalog)
