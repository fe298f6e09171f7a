"""
コマンドラインインタフェースのテスト
"""

import json

from pycsgemu.cli import render_main, compare_main, bench_main
from pycsgemu.core.types import MixerSelect
from pycsgemu.trace import TickTrace, create_release_schedule


def test_render_and_compare(tmp_path, capsys):
    first = tmp_path / "first.npz"
    second = tmp_path / "second.npz"
    plot = tmp_path / "first.png"

    assert render_main(['--ticks', '2000', '--release-tick', '10', '-o', str(first),
                        '--plot', str(plot)]) == 0
    assert render_main(['--ticks', '2000', '--release-tick', '10', '-o', str(second)]) == 0
    assert first.exists() and plot.exists()
    assert len(TickTrace.load(first)) == 2000

    assert compare_main([str(first), str(second)]) == 0
    assert "MATCH" in capsys.readouterr().out


def test_compare_detects_difference(tmp_path, capsys):
    vco = tmp_path / "vco.npz"
    noise = tmp_path / "noise.npz"
    render_main(['--ticks', '3000', '-o', str(vco), '--mixer', 'vco'])
    render_main(['--ticks', '3000', '-o', str(noise), '--mixer', 'noise'])

    assert compare_main([str(vco), str(noise)]) == 1
    assert "MISMATCH" in capsys.readouterr().out


def test_render_from_schedule_file(tmp_path):
    schedule_path = tmp_path / "schedule.json"
    create_release_schedule(50, mixer_select=MixerSelect.SLF).save(schedule_path)

    output = tmp_path / "trace.npz"
    assert render_main(['--ticks', '1000', '--schedule', str(schedule_path),
                        '-o', str(output), '--no-probes']) == 0
    trace = TickTrace.load(output)
    assert trace.probes == {}
    assert trace.metadata['schedule']['events'][0]['tick'] == 50


def test_errors_return_one(tmp_path, capsys):
    assert compare_main([str(tmp_path / "a.npz"), str(tmp_path / "b.npz")]) == 1
    assert render_main(['--schedule', str(tmp_path / "missing.json")]) == 1
    assert "エラー" in capsys.readouterr().out


def test_bench(capsys):
    assert bench_main(['--ticks', '500', '--runs', '1']) == 0
    assert "ticks/s" in capsys.readouterr().out


def test_malformed_schedule_reports_error(tmp_path, capsys):
    bad_control = tmp_path / "bad_control.json"
    bad_control.write_text(json.dumps({'initial_controls': {'mixer_select': 'slf'}}), encoding='utf-8')
    bad_tick = tmp_path / "bad_tick.json"
    bad_tick.write_text(json.dumps({'events': [{'tick': 'soon', 'changes': {'inhibit': False}}]}),
                        encoding='utf-8')
    bad_change = tmp_path / "bad_change.json"
    bad_change.write_text(json.dumps({'events': [{'tick': 5, 'changes': {'envelope_select': 'vco'}}]}),
                          encoding='utf-8')

    for path in (bad_control, bad_tick, bad_change):
        assert render_main(['--ticks', '100', '--schedule', str(path),
                            '-o', str(tmp_path / "out.npz")]) == 1
        assert "エラー" in capsys.readouterr().out


def test_output_without_extension(tmp_path, capsys):
    output = tmp_path / "trace"
    assert render_main(['--ticks', '500', '-o', str(output)]) == 0
    assert str(tmp_path / "trace.npz") in capsys.readouterr().out
    assert (tmp_path / "trace.npz").exists()

    assert compare_main([str(output), str(output)]) == 0
    assert "MATCH" in capsys.readouterr().out
