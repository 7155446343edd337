"""Pytest configuration and fixtures for heatmap tests."""

import sys
from io import BytesIO
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


def make_png(color=(255, 255, 255, 255), size=(4, 4), mode='RGBA') -> bytes:
    """Encode a solid-colour PNG."""
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format='PNG')
    return buf.getvalue()


def make_response(status: int, body: bytes = b'') -> MagicMock:
    resp = MagicMock()
    resp.status = status
    resp.read = AsyncMock(return_value=body)
    resp.text = AsyncMock(return_value=body.decode('utf-8', 'replace'))
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    return resp


def make_session(routes: dict) -> MagicMock:
    """
    Fake aiohttp session.

    routes maps URL -> (status, body) or an exception instance to raise.
    Unknown URLs answer 404. Use session.get.call_args_list to inspect requests.
    """

    def _get(url, **kwargs):
        route = routes.get(url, (404, b''))
        if isinstance(route, Exception):
            raise route
        status, body = route
        return make_response(status, body)

    session = MagicMock()
    session.get = MagicMock(side_effect=_get)
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return session


@pytest.fixture
def png_bytes():
    return make_png


@pytest.fixture
def fake_session():
    return make_session
