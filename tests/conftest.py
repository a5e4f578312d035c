# tests/conftest.py
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pricing.config import Settings
from pricing.service import create_pricing_service
from pricing.transforms import load_seed, parse_seed_data

SEED_PATH = os.path.join(str(ROOT), "data", "seed.json")


@pytest.fixture
def seed_data():
    return load_seed(SEED_PATH)


@pytest.fixture
def catalog(seed_data):
    return parse_seed_data(seed_data)


@pytest.fixture
def settings():
    return Settings(seed_path=SEED_PATH)


@pytest.fixture
def pricing_service(settings, catalog):
    return create_pricing_service(settings, catalog)


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
