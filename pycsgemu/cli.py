"""
SN76477 CSG Emulator - Command Line Interface

コマンドライン用のエントリーポイントを提供します。
"""

import sys
import argparse
from typing import List, Optional

from .core.types import CSGError, ControlInputs, MixerSelect, EnvelopeSelect
from .core.device_config import create_preset_config
from .core.sound_generator import create_sound_generator


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """エンジン設定用の共通オプションを追加"""
    parser.add_argument(
        '--slf-rate', type=int, default=0, choices=range(4),
        help='SLFレートプリセット 0-3 (173/35/16/3 Hz, default: 0)'
    )
    parser.add_argument(
        '--attack-rate', type=int, default=0, choices=range(4),
        help='アタックレートプリセット 0-3 (default: 0)'
    )
    parser.add_argument(
        '--decay-rate', type=int, default=None, choices=range(4),
        help='ディケイレートプリセット 0-3 (省略時はリファレンスの1ステップ/ストローブ)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='デバッグ出力を有効化'
    )


def _build_config(parsed_args: argparse.Namespace):
    overrides = {'enable_debug': parsed_args.debug}
    decay_rate = parsed_args.decay_rate
    if decay_rate is None:
        decay_rate = 0
        overrides.update(decay_step=1, decay_interval=1)
    return create_preset_config(parsed_args.slf_rate, parsed_args.attack_rate, decay_rate, **overrides)


def render_main(args: Optional[List[str]] = None) -> int:
    """トレース記録のメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='SN76477 CSG Emulator - render a tick trace',
        prog='pycsgemu-render'
    )
    parser.add_argument(
        '--ticks',
        type=int,
        default=48000,
        help='記録するマスターティック数 (default: 48000)'
    )
    parser.add_argument(
        '--schedule',
        default=None,
        help='制御スケジュールJSONファイル'
    )
    parser.add_argument(
        '--release-tick',
        type=int,
        default=0,
        help='スケジュール未指定時にinhibitを解除するティック (default: 0)'
    )
    parser.add_argument(
        '--mixer',
        choices=[m.name.lower() for m in MixerSelect],
        default='vco',
        help='スケジュール未指定時のミキサー選択 (default: vco)'
    )
    parser.add_argument(
        '--envelope',
        choices=[e.name.lower() for e in EnvelopeSelect],
        default='mixer_only',
        help='スケジュール未指定時のエンベロープ選択 (default: mixer_only)'
    )
    parser.add_argument(
        '--vco-slf',
        action='store_true',
        help='VCOピッチをSLFで変調'
    )
    parser.add_argument(
        '--high-pitch',
        action='store_true',
        help='固定ピッチを高音側に設定'
    )
    parser.add_argument(
        '-o', '--output',
        default='trace.npz',
        help='出力トレースファイル (default: trace.npz)'
    )
    parser.add_argument(
        '--plot',
        default=None,
        help='波形画像の出力ファイル (PNG/SVG等)'
    )
    parser.add_argument(
        '--no-probes',
        action='store_true',
        help='出力サンプルのみを記録'
    )
    _add_config_arguments(parser)

    parsed_args = parser.parse_args(args)

    try:
        from .trace import ControlSchedule, create_release_schedule, render_trace

        config = _build_config(parsed_args)
        generator = create_sound_generator(config)

        if parsed_args.schedule:
            schedule = ControlSchedule.load(parsed_args.schedule)
        else:
            schedule = create_release_schedule(
                parsed_args.release_tick,
                mixer_select=MixerSelect[parsed_args.mixer.upper()],
                envelope_select=EnvelopeSelect[parsed_args.envelope.upper()],
                vco_select=parsed_args.vco_slf,
                vco_pitch_preset=parsed_args.high_pitch
            )

        print(f"設定: {config}")
        print(f"{parsed_args.ticks} ティックを記録中...")
        trace = render_trace(generator, schedule, parsed_args.ticks,
                             probes=not parsed_args.no_probes)
        saved_path = trace.save(parsed_args.output)
        print(f"トレースを保存しました: {saved_path} ({trace.duration*1000:.2f} ms)")

        if parsed_args.plot:
            from .debug.waveform_viewer import save_trace_plot
            save_trace_plot(trace, parsed_args.plot)
            print(f"波形を保存しました: {parsed_args.plot}")

        return 0

    except KeyboardInterrupt:
        print("\n中断されました")
        return 1
    except CSGError as e:
        print(f"エラー: {e}")
        return 1


def compare_main(args: Optional[List[str]] = None) -> int:
    """トレース比較のメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='SN76477 CSG Emulator - compare two tick traces',
        prog='pycsgemu-compare'
    )
    parser.add_argument('expected', help='期待トレース (.npz)')
    parser.add_argument('actual', help='比較対象トレース (.npz)')
    parser.add_argument(
        '--signals',
        nargs='*',
        default=None,
        help='比較するプローブ名 (省略時は共通の全プローブ)'
    )

    parsed_args = parser.parse_args(args)

    try:
        from .trace import TickTrace, compare_traces

        expected = TickTrace.load(parsed_args.expected)
        actual = TickTrace.load(parsed_args.actual)
        result = compare_traces(expected, actual, signals=parsed_args.signals)

        print(result.summary())
        return 0 if result.matches else 1

    except KeyboardInterrupt:
        print("\n中断されました")
        return 1
    except CSGError as e:
        print(f"エラー: {e}")
        return 1


def bench_main(args: Optional[List[str]] = None) -> int:
    """性能計測のメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='SN76477 CSG Emulator - tick throughput benchmark',
        prog='pycsgemu-bench'
    )
    parser.add_argument(
        '--ticks',
        type=int,
        default=100000,
        help='1回あたりのティック数 (default: 100000)'
    )
    parser.add_argument(
        '--runs',
        type=int,
        default=3,
        help='計測回数 (default: 3)'
    )
    _add_config_arguments(parser)

    parsed_args = parser.parse_args(args)

    try:
        from .debug.profiler import benchmark_generator

        generator = create_sound_generator(_build_config(parsed_args))
        summary = benchmark_generator(generator, parsed_args.ticks, parsed_args.runs,
                                      controls=ControlInputs(inhibit=False, vco_select=True))

        print(f"実行回数: {summary['runs']} (合計 {summary['total_ticks']} ティック)")
        print(f"平均スループット: {summary['avg_ticks_per_second']:,.0f} ticks/s")
        print(f"最大スループット: {summary['max_ticks_per_second']:,.0f} ticks/s")
        print(f"実時間比: {summary['avg_realtime_ratio']:.4f}x")
        print(f"最大メモリ使用量: {summary['max_memory_usage']:.1f} MB")
        return 0

    except KeyboardInterrupt:
        print("\n中断されました")
        return 1
    except CSGError as e:
        print(f"エラー: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(render_main())
