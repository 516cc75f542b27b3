from __future__ import annotations

import pytest

from fakes import png_bytes


@pytest.fixture
def png_body() -> bytes:
    return png_bytes()
