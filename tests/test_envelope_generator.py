"""
エンベロープセレクタ・シェイパのテスト
"""

import pytest

from pycsgemu.core.envelope_generator import EnvelopeSelector, EnvelopeShaper
from pycsgemu.core.types import EnvelopeState, EnvelopeSelect, InvalidValueError


class TestEnvelopeSelector:

    @pytest.mark.parametrize("vco", [False, True])
    @pytest.mark.parametrize("one_shot", [False, True])
    @pytest.mark.parametrize("vco2", [False, True])
    def test_selection_table(self, vco, one_shot, vco2):
        assert EnvelopeSelector.select(EnvelopeSelect.VCO, vco, one_shot, vco2) == vco
        assert EnvelopeSelector.select(EnvelopeSelect.MIXER_ONLY, vco, one_shot, vco2) is True
        assert EnvelopeSelector.select(EnvelopeSelect.ONE_SHOT, vco, one_shot, vco2) == one_shot
        assert EnvelopeSelector.select(EnvelopeSelect.VCO_ALTERNATING, vco, one_shot, vco2) == vco2

    def test_upper_bits_are_masked(self):
        assert EnvelopeSelector.select(0b110, False, True, False) is True

    def test_describe(self):
        assert EnvelopeSelector.describe(EnvelopeSelect.ONE_SHOT) == "One-shot"


class TestEnvelopeShaper:

    def test_holds_without_strobe(self):
        shaper = EnvelopeShaper(attack_step=153)
        state = EnvelopeState(magnitude=100)
        assert shaper.next_state(state, True, strobe=False) is state

    def test_attack_and_decay(self):
        shaper = EnvelopeShaper(attack_step=153, decay_step=7)
        assert shaper.next_state(EnvelopeState(magnitude=100), True, True).magnitude == 253
        assert shaper.next_state(EnvelopeState(magnitude=100), False, True).magnitude == 93

    def test_decay_stops_at_zero(self):
        shaper = EnvelopeShaper(attack_step=153, decay_step=14)
        assert shaper.next_state(EnvelopeState(magnitude=5), False, True).magnitude == 0

    def test_attack_stops_at_saturation(self):
        shaper = EnvelopeShaper(attack_step=153)
        state = shaper.next_state(EnvelopeState(magnitude=0x37FF), True, True)
        assert state.magnitude == 0x37FF + 153
        assert EnvelopeShaper.is_saturated(state.magnitude)
        assert shaper.next_state(state, True, True).magnitude == state.magnitude

    def test_never_exceeds_saturation_limit(self):
        shaper = EnvelopeShaper(attack_step=0x800)
        for _ in range(100):
            shaper.commit(shaper.next_state(shaper.state, True, True))
            assert shaper.get_magnitude() <= shaper.saturation_limit
        assert shaper.saturation_limit == 0x3FFF

    def test_prescaler_spaces_steps(self):
        shaper = EnvelopeShaper(attack_step=10, attack_interval=3)
        magnitudes = []
        for _ in range(7):
            shaper.commit(shaper.next_state(shaper.state, True, True))
            magnitudes.append(shaper.get_magnitude())
        assert magnitudes == [10, 10, 10, 20, 20, 20, 30]

    def test_reset(self):
        shaper = EnvelopeShaper(attack_step=153)
        shaper.commit(EnvelopeState(magnitude=1000, prescaler=2))
        shaper.reset()
        assert shaper.state == EnvelopeState()

    @pytest.mark.parametrize("kwargs", [
        dict(attack_step=0),
        dict(attack_step=0x801),
        dict(attack_step=10, decay_step=0),
        dict(attack_step=10, attack_interval=0),
        dict(attack_step=10, decay_interval=0),
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(InvalidValueError):
            EnvelopeShaper(**kwargs)
