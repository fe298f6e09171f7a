"""
制御スケジュール・トレース記録・比較のテスト
"""

import json

import numpy as np
import pytest

from pycsgemu.core.device_config import CSGConfig
from pycsgemu.core.sound_generator import create_sound_generator
from pycsgemu.core.types import ControlInputs, MixerSelect, EnvelopeSelect
from pycsgemu.trace import (
    TraceError,
    ControlEvent,
    ControlSchedule,
    TickTrace,
    PROBE_SIGNALS,
    create_release_schedule,
    render_trace,
    compare_traces,
)


class TestControlSchedule:

    def test_events_sorted_stably(self):
        schedule = ControlSchedule()
        schedule.add(50, inhibit=False)
        schedule.add(10, mixer_select=MixerSelect.NOISE)
        schedule.add(50, inhibit=True)

        assert [event.tick for event in schedule] == [10, 50, 50]
        assert [event.changes['inhibit'] for event in schedule.events_at(50)] == [False, True]
        assert schedule.last_tick == 50
        assert len(schedule) == 3

    def test_empty_schedule(self):
        schedule = ControlSchedule()
        assert schedule.last_tick == -1
        assert schedule.initial_controls == ControlInputs().masked()

    def test_invalid_events(self):
        with pytest.raises(TraceError):
            ControlEvent(tick=-1)
        with pytest.raises(TraceError):
            ControlEvent(tick=0, reset_ticks=-2)
        with pytest.raises(TraceError):
            ControlSchedule().add(5, volume=10)

    def test_json_round_trip(self, tmp_path):
        schedule = create_release_schedule(100, mixer_select=MixerSelect.SLF, vco_select=True)
        schedule.add(400, reset_ticks=2)

        path = tmp_path / "schedule.json"
        schedule.save(path)
        data = json.loads(path.read_text(encoding='utf-8'))
        assert data['initial_controls']['inhibit'] is True

        loaded = ControlSchedule.load(path)
        assert loaded.to_dict() == schedule.to_dict()

    def test_load_errors(self, tmp_path):
        with pytest.raises(TraceError):
            ControlSchedule.load(tmp_path / "missing.json")

        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding='utf-8')
        with pytest.raises(TraceError):
            ControlSchedule.load(broken)

        incomplete = tmp_path / "incomplete.json"
        incomplete.write_text(json.dumps({'events': [{'changes': {}}]}), encoding='utf-8')
        with pytest.raises(TraceError):
            ControlSchedule.load(incomplete)

    def test_malformed_values_raise_trace_error(self):
        with pytest.raises(TraceError):
            ControlSchedule.from_dict({'initial_controls': {'mixer_select': 'slf'}})
        with pytest.raises(TraceError):
            ControlSchedule.from_dict({'events': [{'tick': 'soon'}]})
        with pytest.raises(TraceError):
            ControlSchedule.from_dict({'events': [{'tick': 3, 'changes': {'mixer_select': None}}]})
        with pytest.raises(TraceError):
            ControlSchedule.from_dict({'events': 5})
        with pytest.raises(TraceError):
            ControlSchedule().add(10, envelope_select='one_shot')

    def test_numeric_strings_are_accepted(self):
        schedule = ControlSchedule.from_dict({'events': [{'tick': '7', 'changes': {'mixer_select': 2}}]})
        assert schedule.last_tick == 7


class TestRenderTrace:

    def test_probes_recorded(self, fast_generator):
        schedule = create_release_schedule(10, mixer_select=MixerSelect.VCO)
        trace = render_trace(fast_generator, schedule, 2000)

        assert len(trace) == 2000
        assert set(trace.probes) == set(PROBE_SIGNALS)
        for name, values in trace.probes.items():
            assert values.dtype == PROBE_SIGNALS[name]
            assert len(values) == 2000

        assert not trace.output[:11].any()
        assert trace.metadata['num_ticks'] == 2000
        assert trace.duration == pytest.approx(2000 / 24576000.0)

    def test_output_matches_direct_stepping(self, fast_config):
        schedule = create_release_schedule(
            0, mixer_select=MixerSelect.VCO_NOISE, envelope_select=EnvelopeSelect.MIXER_ONLY)
        trace = render_trace(create_sound_generator(fast_config), schedule, 3000, probes=False)
        assert trace.probes == {}

        generator = create_sound_generator(fast_config)
        generator.set_controls(schedule.initial_controls)
        expected = []
        for t in range(3000):
            if t == 0:
                generator.write_control(inhibit=False)
            expected.append(generator.step())
        np.testing.assert_array_equal(trace.output, np.array(expected, dtype=np.uint16))

    def test_probe_subset(self, fast_generator):
        trace = render_trace(fast_generator, None, 100, probes=['vco', 'magnitude'])
        assert set(trace.probes) == {'vco', 'magnitude'}

        with pytest.raises(TraceError):
            render_trace(fast_generator, None, 100, probes=['volume'])

    def test_negative_ticks(self, fast_generator):
        with pytest.raises(TraceError):
            render_trace(fast_generator, None, -1)

    def test_reset_window_restarts_device(self, fast_config):
        controls = ControlInputs(mixer_select=MixerSelect.VCO_NOISE, vco_select=True, inhibit=False)

        schedule = ControlSchedule(initial_controls=controls)
        schedule.add(1000, reset_ticks=3)
        trace = render_trace(create_sound_generator(fast_config), schedule, 4000)

        assert not trace.output[1000:1003].any()

        fresh = render_trace(create_sound_generator(fast_config), ControlSchedule(initial_controls=controls), 2997)
        np.testing.assert_array_equal(trace.output[1003:], fresh.output)

    def test_deterministic(self, fast_config):
        schedule = create_release_schedule(200, mixer_select=MixerSelect.SLF_NOISE_VCO, vco_select=True)
        first = render_trace(create_sound_generator(fast_config), schedule, 5000)
        second = render_trace(create_sound_generator(fast_config), schedule, 5000)
        assert compare_traces(first, second).matches


class TestTickTrace:

    def test_save_load(self, tmp_path, fast_generator):
        trace = render_trace(fast_generator, create_release_schedule(5), 1500)
        path = tmp_path / "trace.npz"
        trace.save(path)

        loaded = TickTrace.load(path)
        np.testing.assert_array_equal(loaded.output, trace.output)
        for name in trace.probes:
            np.testing.assert_array_equal(loaded.probes[name], trace.probes[name])
        assert loaded.metadata == trace.metadata

    def test_save_appends_extension(self, tmp_path, fast_generator):
        trace = render_trace(fast_generator, None, 200)
        saved = trace.save(tmp_path / "capture")
        assert saved == tmp_path / "capture.npz"
        assert saved.exists()
        assert not (tmp_path / "capture").exists()

        loaded = TickTrace.load(tmp_path / "capture")
        np.testing.assert_array_equal(loaded.output, trace.output)

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(TraceError):
            TickTrace.load(tmp_path / "missing.npz")

    def test_probe_length_mismatch(self):
        with pytest.raises(TraceError):
            TickTrace(output=np.zeros(10), probes={'vco': np.zeros(9, dtype=bool)})

    def test_unknown_signal(self):
        trace = TickTrace(output=np.zeros(4))
        with pytest.raises(TraceError):
            trace.signal('vco')


class TestCompareTraces:

    def make_trace(self, length=100):
        output = np.arange(length, dtype=np.uint16)
        probes = {'vco': (np.arange(length) % 2).astype(bool)}
        return TickTrace(output=output, probes=probes)

    def test_identical(self):
        result = compare_traces(self.make_trace(), self.make_trace())
        assert result.matches
        assert result.first_mismatch is None
        assert result.summary() == "MATCH (100 ticks)"

    def test_output_mismatch(self):
        expected = self.make_trace()
        actual = self.make_trace()
        actual.output[50] = 0
        actual.output[70] = 0

        result = compare_traces(expected, actual)
        assert not result.matches
        assert result.first_mismatch == 50
        assert result.mismatch_count == 2
        assert "tick 50" in result.summary()

    def test_probe_mismatch(self):
        expected = self.make_trace()
        actual = self.make_trace()
        actual.probes['vco'][30] = not actual.probes['vco'][30]

        result = compare_traces(expected, actual)
        assert result.first_mismatch is None
        assert result.signal_mismatches == {'vco': 30}

    def test_length_mismatch(self):
        result = compare_traces(self.make_trace(100), self.make_trace(80))
        assert result.length_mismatch
        assert result.compared_ticks == 80
        assert not result.matches

    def test_selected_signal_missing(self):
        with pytest.raises(TraceError):
            compare_traces(self.make_trace(), self.make_trace(), signals=['magnitude'])
