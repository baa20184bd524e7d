import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Commands reconfigure structlog against captured streams; undo that after every test."""
    yield
    structlog.reset_defaults()
