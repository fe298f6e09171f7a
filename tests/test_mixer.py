"""
ミキサーのテスト
"""

import itertools

import pytest

from pycsgemu.core.mixer import Mixer
from pycsgemu.core.types import MixerSelect


EXPECTED = {
    MixerSelect.VCO: lambda vco, noise, slf, env: vco,
    MixerSelect.NOISE: lambda vco, noise, slf, env: noise,
    MixerSelect.SLF_NOISE: lambda vco, noise, slf, env: slf and noise,
    MixerSelect.SLF_VCO: lambda vco, noise, slf, env: slf and vco,
    MixerSelect.SLF: lambda vco, noise, slf, env: slf,
    MixerSelect.VCO_NOISE: lambda vco, noise, slf, env: vco and noise,
    MixerSelect.SLF_NOISE_VCO: lambda vco, noise, slf, env: slf and noise and vco,
    MixerSelect.ENVELOPE: lambda vco, noise, slf, env: env,
}


@pytest.mark.parametrize("code", list(MixerSelect))
def test_truth_table(code):
    for vco, noise, slf, env in itertools.product([False, True], repeat=4):
        assert Mixer.mix(code, vco, noise, slf, env) == EXPECTED[code](vco, noise, slf, env)


def test_upper_bits_are_masked():
    assert Mixer.mix(0b1100, vco=False, noise=False, slf=True, envelope=False) is True


def test_analyze_mixer_select():
    info = Mixer.analyze_mixer_select(MixerSelect.SLF_NOISE_VCO)
    assert info['binary'] == "0b110"
    assert info['uses_vco'] and info['uses_noise'] and info['uses_slf']

    info = Mixer.analyze_mixer_select(MixerSelect.ENVELOPE)
    assert not (info['uses_vco'] or info['uses_noise'] or info['uses_slf'])
