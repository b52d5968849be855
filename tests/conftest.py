import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from playback.config import PlaybackConfig
from playback.controller import PlaybackController


FAST = PlaybackConfig(default_speed=100, step_unit_ms=0.01, min_delay_ms=0.2, grace_factor=0.5)


@pytest.fixture
def fast_config():
    return FAST


@pytest.fixture
def make_controller(fast_config):
    """Controller factory that also records every published frame."""

    def _make(domain, config=None):
        controller = PlaybackController(domain, config or fast_config)
        controller.timeline = []
        controller.subscribe(on_frame=controller.timeline.append)
        return controller

    return _make


@pytest.fixture
def play():
    """Start one Run and wait for it to finish."""

    async def _play(controller, algorithm, params=None):
        run = controller.start(algorithm, params)
        assert run is not None
        await controller.wait()
        return run

    return _play
