import pytest

from cvbuilder.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any local .env file."""
    return Settings(gemini_api_key="test-key", posthog_key=None, sentry_dsn=None, _env_file=None)
