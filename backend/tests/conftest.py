from pathlib import Path

import pytest
from app.settings import Settings

BACKEND_DIR = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings from config.test.toml, independent of the working directory."""
    return Settings(
        config_path=str(BACKEND_DIR / "config.test.toml"),
        secrets_path=str(BACKEND_DIR / "secrets.test.toml"),
    )
