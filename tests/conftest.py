import pytest
from loguru import logger

from app.utils.config import Settings


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_settings(tmp_path):
    """Build Settings that ignore the environment's .env file."""

    def _make(**overrides) -> Settings:
        values = {
            "watch_path": str(tmp_path / "drop"),
            "formats": f"zip={tmp_path / 'out'}",
            "profile_username": "user",
            "profile_password": "secret",
            "cse_base_url": "https://cse.test/model.php?partID=",
            "grace_period": 0,
            "settle_timeout": 0.5,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
