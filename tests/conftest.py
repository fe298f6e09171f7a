"""
共通フィクスチャ
"""

import pytest

from pycsgemu.core.device_config import CSGConfig
from pycsgemu.core.sound_generator import create_sound_generator


@pytest.fixture
def default_config():
    return CSGConfig()


@pytest.fixture
def fast_config():
    """短いワンショットと高速なSLFを持つ設定"""
    return CSGConfig(
        one_shot_duration=4,
        vco_pitch_low=9,
        vco_min=2,
        slf_upper_bound=6,
        slf_step_interval=0
    )


@pytest.fixture
def generator():
    return create_sound_generator()


@pytest.fixture
def fast_generator(fast_config):
    return create_sound_generator(fast_config)
