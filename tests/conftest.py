# tests/conftest.py
import os
import sys
from pathlib import Path

import pytest

# 1) Вимикаємо автопідхоплення сторонніх плагінів
os.environ.setdefault("PYTEST_DISABLE_PLUGIN_AUTOLOAD", "1")

# 2) Додаємо src у sys.path, щоб працював імпорт "pricecart.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pricecart.config.settings import CartSettings  # noqa: E402
from pricecart.domain.cart.events import RecordingEventSink  # noqa: E402
from pricecart.infrastructure.storage import MemorySessionStorage  # noqa: E402


@pytest.fixture
def settings() -> CartSettings:
    return CartSettings()


@pytest.fixture
def session() -> dict:
    return {}


@pytest.fixture
def storage(session, settings) -> MemorySessionStorage:
    return MemorySessionStorage(session, settings=settings)


@pytest.fixture
def events() -> RecordingEventSink:
    return RecordingEventSink()
