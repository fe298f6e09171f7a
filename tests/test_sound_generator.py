"""
SoundGenerator (コアエミュレータ) のテスト

ティック単位の同期動作と、ワンショット・ミキサー・固定ピッチの
各シナリオを検証します。
"""

import numpy as np
import pytest

from pycsgemu.core.device_config import CSGConfig
from pycsgemu.core.sound_generator import (
    SoundGenerator,
    create_sound_generator,
    create_debug_generator,
)
from pycsgemu.core.types import (
    ControlInputs,
    MixerSelect,
    EnvelopeSelect,
    InvalidValueError,
    MASK_14BIT,
)


COMPONENT_KEYS = ('divider', 'noise', 'slf', 'vco', 'one_shot', 'envelope', 'master_tick_counter')


def component_state(generator):
    state = generator.get_csg_state().to_dict()
    return {key: state[key] for key in COMPONENT_KEYS}


class TestBasics:

    def test_initial_state(self, generator):
        assert generator.name == "SN76477 CSG"
        assert generator.get_output() == 0
        assert generator.master_tick_counter == 0

    def test_inhibit_mutes_output(self, generator):
        samples = generator.run(5000, ControlInputs(mixer_select=MixerSelect.VCO, inhibit=True))
        assert samples.dtype == np.uint16
        assert len(samples) == 5000
        assert not samples.any()

    def test_tick_returns_cycle_count(self, generator):
        assert generator.tick(100) == 100
        assert generator.master_tick_counter == 100
        with pytest.raises(InvalidValueError):
            generator.tick(-1)

    def test_run_rejects_negative(self, generator):
        with pytest.raises(InvalidValueError):
            generator.run(-5)

    def test_controls_are_masked(self, generator):
        generator.set_controls(ControlInputs(mixer_select=0b1100, envelope_select=0b110))
        controls = generator.get_controls()
        assert controls.mixer_select == MixerSelect.SLF
        assert controls.envelope_select == EnvelopeSelect.ONE_SHOT

    def test_write_control(self, generator):
        generator.write_control(inhibit=False, mixer_select=MixerSelect.NOISE)
        assert generator.get_controls().inhibit is False
        assert generator.get_controls().mixer_select == MixerSelect.NOISE
        with pytest.raises(InvalidValueError):
            generator.write_control(volume=3)


class TestScenarios:

    def test_fixed_pitch_is_periodic(self, fast_generator):
        fast_generator.set_controls(ControlInputs(
            mixer_select=MixerSelect.VCO,
            vco_pitch_preset=False,
            envelope_select=EnvelopeSelect.MIXER_ONLY,
            inhibit=False
        ))

        for t in range(1, 2001):
            output = fast_generator.step()
            signals = fast_generator.get_signals()
            magnitude = fast_generator.envelope_shaper.get_magnitude()

            assert signals.pitch == 9
            assert signals.vco == (((t - 1) // 10) % 2 == 0)
            assert output == (magnitude if signals.vco else 0)

        # ストローブごとにアタックしている
        assert fast_generator.envelope_shaper.get_magnitude() > 0

    def test_high_pitch_preset(self, generator):
        generator.set_controls(ControlInputs(vco_pitch_preset=True, inhibit=False))
        generator.step()
        assert generator.get_signals().pitch == 1151

    def test_slf_only_mixer(self, fast_generator):
        fast_generator.set_controls(ControlInputs(
            mixer_select=MixerSelect.SLF,
            envelope_select=EnvelopeSelect.MIXER_ONLY,
            inhibit=False
        ))

        slf_values = set()
        for _ in range(3000):
            output = fast_generator.step()
            signals = fast_generator.get_signals()
            slf_values.add(signals.slf)
            assert output == (fast_generator.envelope_shaper.get_magnitude() if signals.slf else 0)

        assert slf_values == {False, True}

    def test_slf_modulates_pitch(self, default_config):
        generator = create_sound_generator(default_config)
        generator.set_controls(ControlInputs(vco_select=True, inhibit=False))

        for _ in range(500):
            sawtooth = generator.slf.get_sawtooth()
            generator.step()
            assert generator.get_signals().pitch == sawtooth

    def test_one_shot_envelope(self, fast_config):
        generator = create_sound_generator(fast_config)
        generator.set_controls(ControlInputs(
            mixer_select=MixerSelect.ENVELOPE,
            envelope_select=EnvelopeSelect.ONE_SHOT,
            inhibit=True
        ))

        release = 1000
        total = release + 3000
        one_shot = []
        strobes = []
        magnitudes = []
        outputs = []
        for t in range(total):
            if t == release:
                generator.write_control(inhibit=False)
            strobes.append(generator.clock_divider.strobe)
            outputs.append(generator.step())
            one_shot.append(generator.get_signals().one_shot)
            magnitudes.append(generator.envelope_shaper.get_magnitude())

        high = [t for t, value in enumerate(one_shot) if value]
        assert high[0] == release + 1
        last = high[-1]
        assert high == list(range(release + 1, last + 1))

        # ワンショット区間でちょうどduration回のストローブを消費
        assert strobes[last] is True
        assert sum(strobes[release + 1:last + 1]) == fast_config.one_shot_duration

        # 出力はワンショット区間のみエンベロープ振幅
        for t in range(total):
            expected = magnitudes[t] if one_shot[t] else 0
            assert outputs[t] == expected

        # アタック中は単調増加
        attack = magnitudes[release + 1:last + 1]
        assert all(b >= a for a, b in zip(attack, attack[1:]))
        peak = magnitudes[last]
        assert peak > 0

        # 区間終了後はディケイ
        generator.tick(10 * 512)
        assert generator.envelope_shaper.get_magnitude() < peak

    def test_default_one_shot_lasts_26ms(self, default_config):
        generator = create_sound_generator(default_config)
        assert generator.one_shot.duration == 1248
        assert default_config.one_shot_time * 1000 == pytest.approx(26.0)


class TestInvariants:

    def test_long_run_invariants(self):
        generator = create_sound_generator(CSGConfig(attack_step=0x800, one_shot_duration=8))
        generator.set_controls(ControlInputs(
            mixer_select=MixerSelect.VCO_NOISE,
            vco_select=True,
            envelope_select=EnvelopeSelect.VCO_ALTERNATING,
            inhibit=False
        ))

        limit = generator.envelope_shaper.saturation_limit
        for t in range(20000):
            if t % 3000 == 0:
                generator.write_control(inhibit=(t // 3000) % 2 == 1)
            output = generator.step()
            signals = generator.get_signals()

            assert 0 <= output <= MASK_14BIT
            assert 0 <= generator.envelope_shaper.get_magnitude() <= limit
            assert generator.noise_generator.get_lfsr_state() != 0
            if signals.vco2:
                assert signals.vco

    def test_determinism(self, fast_config):
        controls = ControlInputs(mixer_select=MixerSelect.SLF_NOISE_VCO, vco_select=True, inhibit=False)
        first = create_sound_generator(fast_config).run(8000, controls)
        second = create_sound_generator(fast_config).run(8000, controls)
        np.testing.assert_array_equal(first, second)


class TestReset:

    def test_reset_pulse_reinitialises_state(self, fast_config):
        generator = create_sound_generator(fast_config)
        generator.set_controls(ControlInputs(mixer_select=MixerSelect.NOISE, vco_select=True, inhibit=False))
        generator.tick(5000)

        assert generator.step(reset=True) == 0
        assert generator.step(reset=True) == 0
        fresh = create_sound_generator(fast_config)
        assert component_state(generator) == component_state(fresh)
        assert generator.master_tick_counter == 0

    def test_behaviour_after_reset_matches_fresh_start(self, fast_config):
        controls = ControlInputs(mixer_select=MixerSelect.VCO_NOISE, vco_select=True, inhibit=False)

        generator = create_sound_generator(fast_config)
        generator.set_controls(controls)
        generator.tick(3333)
        generator.step(reset=True)
        after_reset = generator.run(4000)

        fresh = create_sound_generator(fast_config).run(4000, controls)
        np.testing.assert_array_equal(after_reset, fresh)

    def test_reset_method_clears_statistics(self, generator):
        generator.tick(600)
        generator.reset()
        info = generator.get_debug_info()
        assert info['statistics']['total_ticks'] == 0
        assert generator.master_tick_counter == 0


class TestStatePersistence:

    def test_state_round_trip_continues_identically(self, fast_config):
        controls = ControlInputs(mixer_select=MixerSelect.SLF_VCO, vco_select=True, inhibit=False)
        generator = create_sound_generator(fast_config)
        generator.set_controls(controls)
        generator.tick(3000)

        state = generator.get_state()
        expected = generator.run(1000)

        restored = create_sound_generator(fast_config)
        restored.set_state(state)
        assert restored.get_controls() == generator.get_controls()
        np.testing.assert_array_equal(restored.run(1000), expected)

    def test_set_state_rejects_zero_lfsr(self, generator):
        state = generator.get_state()
        state['noise']['lfsr'] = 0
        with pytest.raises(InvalidValueError):
            generator.set_state(state)

    def test_set_state_rejects_malformed_dict(self, generator):
        with pytest.raises(InvalidValueError):
            generator.set_state({'noise': {'lfsr': 1}})


class TestDebug:

    def test_debug_info(self, generator):
        generator.set_controls(ControlInputs(inhibit=False))
        generator.tick(1024)
        info = generator.get_debug_info()
        assert info['statistics']['total_ticks'] == 1024
        assert info['statistics']['strobes'] == 1
        assert info['mixer']['name'] == 'VCO'
        assert info['current_state']['master_tick_counter'] == 1024

    def test_debug_generator_prints(self, capsys):
        generator = create_debug_generator()
        generator.reset()
        captured = capsys.readouterr()
        assert "[DEBUG]" in captured.out

    def test_noise_color_not_applied_message(self, capsys):
        SoundGenerator(CSGConfig(noise_color='pink', enable_debug=True))
        assert "noise_color='pink'" in capsys.readouterr().out
