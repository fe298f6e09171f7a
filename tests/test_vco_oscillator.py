"""
VCOのテスト
"""

import pytest

from pycsgemu.core.vco_oscillator import VcoOscillator, calculate_pitch_from_frequency
from pycsgemu.core.types import VcoState, InvalidValueError


def test_counts_down_then_reloads():
    assert VcoOscillator.next_state(VcoState(counter=5, phase=1), pitch=100) == VcoState(counter=4, phase=1)
    assert VcoOscillator.next_state(VcoState(counter=0, phase=1), pitch=100) == VcoState(counter=100, phase=2)


def test_phase_wraps_two_bits():
    assert VcoOscillator.next_state(VcoState(counter=0, phase=3), pitch=7).phase == 0


def test_pitch_is_masked_to_14_bits():
    assert VcoOscillator.next_state(VcoState(), pitch=0x4005).counter == 5


def test_fixed_pitch_period():
    vco = VcoOscillator()
    outputs = []
    for _ in range(80):
        vco.commit(vco.next_state(vco.state, 9))
        outputs.append(vco.get_output())

    # pitch+1 ティックごとにトグル
    expected = [((t - 1) // 10) % 2 == 0 for t in range(1, 81)]
    assert outputs == expected


def test_vco2_is_every_other_high_half_cycle():
    vco = VcoOscillator()
    vco_bits = []
    vco2_bits = []
    for _ in range(400):
        vco.commit(vco.next_state(vco.state, 4))
        vco_bits.append(vco.get_output())
        vco2_bits.append(vco.get_alternate_output())

    assert all(v for v, v2 in zip(vco_bits, vco2_bits) if v2)
    assert sum(vco2_bits) * 2 == sum(vco_bits)


def test_reset():
    vco = VcoOscillator()
    vco.commit(VcoState(counter=3, phase=2))
    vco.reset()
    assert vco.state == VcoState()


def test_calculate_pitch_from_frequency():
    assert calculate_pitch_from_frequency(10667, 24576000) == 1151
    assert calculate_pitch_from_frequency(1.0, 24576000) == 0x3FFF
    with pytest.raises(InvalidValueError):
        calculate_pitch_from_frequency(0, 24576000)
