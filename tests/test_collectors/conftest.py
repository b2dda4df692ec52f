from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture(autouse=True)
def no_backoff_sleep():
    with patch("app.collectors.llm_base.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep
