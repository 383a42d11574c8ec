import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "test")

from kvserver.core.config import Settings
from kvserver.main import create_app
from kvserver.services.store import Store


@pytest.fixture(scope="function")
def store():
    return Store()


@pytest.fixture(scope="function")
def app(store):
    return create_app(Settings(report_interval_seconds=60), store=store)


@pytest.fixture(scope="function")
def client(app):
    with TestClient(app) as test_client:
        yield test_client
