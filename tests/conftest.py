"""
Test fixtures for workout-log-api.

Provides sample Motra text, a fixed clock, in-memory storage and a
FastAPI TestClient wired to them, so tests run offline and do not
depend on the host date or timezone.
"""

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_log_api...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from workout_log_api.api.routes import (
    get_date_resolver,
    get_repository,
    get_sync_service,
)
from workout_log_api.main import app
from workout_log_api.services.date_resolver import DateTextResolver
from workout_log_api.services.storage import InMemoryStore, WorkoutRepository


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


SAMPLE_MOTRA_TEXT = """Mi entrenamiento:
Empuje fuerte
11 feb 2026, 18:36
DURACIÓN: 1h 05min
Volumen: 5.430 kg
Calorías: 410 kcal
Ejercicios: 4
Press banca
1: 12 repeticiones x 45 kg
2: 10 repeticiones x 50 kg
3: 8 repeticiones x 55 kg
Fondos
1: 10 repeticiones x PC
2: 8 repeticiones x PC
Plancha
1: 01:01 x PC
2: 00:45 x PC
Press militar
1: 10 repeticiones x 30 kg
2: 1 repetición x 40 kg

Rastreado con Motra
https://motra.com/app
"""

@pytest.fixture
def sample_motra_text() -> str:
    """A complete shared Motra session."""
    return SAMPLE_MOTRA_TEXT


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2026-03-05 10:00 local time."""
    return lambda: datetime(2026, 3, 5, 10, 0)


@pytest.fixture
def resolver(fixed_clock) -> DateTextResolver:
    return DateTextResolver(clock=fixed_clock)


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def repository(memory_store) -> WorkoutRepository:
    return WorkoutRepository(memory_store)


# ---------------------------------------------------------------------------
# Core Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def sync_service() -> Optional[object]:
    """Remote sync is unconfigured unless a test overrides this fixture."""
    return None


@pytest.fixture
def client(repository, resolver, sync_service) -> TestClient:
    """Per-test FastAPI TestClient backed by in-memory storage."""
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_date_resolver] = lambda: resolver
    app.dependency_overrides[get_sync_service] = lambda: sync_service
    yield TestClient(app)
    app.dependency_overrides.clear()
