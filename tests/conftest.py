# File: tests/conftest.py
import pytest

from doc_scout.config import ExplorerConfig


@pytest.fixture()
def config() -> ExplorerConfig:
    """Fast configuration without the browser fallback."""
    return ExplorerConfig(
        http_timeout=2.0,
        deadline=10.0,
        render_fallback=False,
        min_rendered_text_length=5,
    )
