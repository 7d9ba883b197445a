# tests/services/conftest.py
from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from smartvideo.services.api.app import create_app
from smartvideo.services.channel.host import VideoInfoHost


@pytest.fixture()
def api_client(fake_probe):
    """
    A TestClient whose app is attached to a VideoInfoHost backed by FakeProbe.
    The lifespan detaches the host when the client closes.
    """
    host = VideoInfoHost(probe=fake_probe)
    app = create_app(host=host)
    with TestClient(app) as client:
        yield client
    assert not host.attached
