#!/usr/bin/env python3
"""
SN76477 CSG Emulator - 基本的な使用例

このスクリプトは、CSGエミュレータの基本的な使用方法を示します。
固定ピッチのVCOからワンショット効果音、トレース記録まで、段階的に機能を紹介します。
"""

import numpy as np
from pycsgemu import (
    ControlInputs,
    MixerSelect,
    EnvelopeSelect,
    ControlSchedule,
    create_sound_generator,
    create_preset_config,
    render_trace,
)
from pycsgemu.debug import save_trace_plot, benchmark_generator


def setup_device():
    """デバイスをセットアップ"""
    print("SN76477 CSGエミュレータを初期化中...")
    config = create_preset_config(slf_rate=0, attack_rate=0, decay_rate=0)
    device = create_sound_generator(config)
    return device, config


def count_edges(samples: np.ndarray) -> int:
    """0/非0の切り替わり回数"""
    on = samples != 0
    return int(np.count_nonzero(on[1:] != on[:-1]))


def example_1_fixed_pitch(device, config):
    """例1: 固定ピッチVCO"""
    print("\n=== 例1: 固定ピッチVCO (高音側) ===")

    device.reset()
    device.set_controls(ControlInputs(
        mixer_select=MixerSelect.VCO,
        vco_pitch_preset=True,
        envelope_select=EnvelopeSelect.MIXER_ONLY,
        inhibit=False
    ))

    # 約10ms分
    ticks = int(config.master_clock_frequency * 0.01)
    samples = device.run(ticks)
    print(f"  期待周波数: {config.vco_frequency(config.vco_pitch_high):.1f} Hz")
    print(f"  エッジ数: {count_edges(samples)} (10ms)")
    print(f"  最大振幅: {samples.max()}")


def example_2_one_shot(device, config):
    """例2: ワンショット効果音"""
    print("\n=== 例2: ワンショット + エンベロープ ===")

    device.reset()
    device.set_controls(ControlInputs(
        mixer_select=MixerSelect.NOISE,
        envelope_select=EnvelopeSelect.ONE_SHOT,
        inhibit=True
    ))
    device.tick(1024)

    # inhibitを解除するとワンショットが起動
    device.write_control(inhibit=False)
    ticks = int(config.master_clock_frequency * (config.one_shot_time + 0.005))
    samples = device.run(ticks)

    print(f"  ワンショット時間: {config.one_shot_time*1000:.1f} ms")
    print(f"  出力が非0のティック: {np.count_nonzero(samples)} / {ticks}")
    print(f"  エンベロープ最終値: {device.envelope_shaper.get_magnitude()}")


def example_3_slf_sweep(device, config):
    """例3: SLFによるピッチスイープ"""
    print("\n=== 例3: SLF周波数変調 ===")

    device.reset()
    device.set_controls(ControlInputs(
        mixer_select=MixerSelect.SLF_VCO,
        vco_select=True,
        inhibit=False
    ))

    sawtooth = []
    for _ in range(int(config.master_clock_frequency / config.slf_frequency)):
        device.step()
        sawtooth.append(device.slf.get_sawtooth())

    print(f"  SLF周波数: {config.slf_frequency:.1f} Hz")
    print(f"  のこぎり波範囲: {min(sawtooth)} - {max(sawtooth)}")


def example_4_trace(device, config):
    """例4: スケジュールによるトレース記録"""
    print("\n=== 例4: トレース記録 ===")

    schedule = ControlSchedule(initial_controls=ControlInputs(
        mixer_select=MixerSelect.VCO_NOISE,
        envelope_select=EnvelopeSelect.ONE_SHOT
    ))
    schedule.add(512, inhibit=False)
    schedule.add(20000, reset_ticks=4)

    trace = render_trace(device, schedule, 40000)
    print(f"  {trace}")

    path = save_trace_plot(trace, "basic_usage_trace.png", start=0, end=4000)
    print(f"  波形を保存しました: {path}")


def main():
    """メイン関数"""
    print("SN76477 CSG Emulator - 基本使用例")
    print("=" * 50)

    try:
        device, config = setup_device()

        example_1_fixed_pitch(device, config)
        example_2_one_shot(device, config)
        example_3_slf_sweep(device, config)
        example_4_trace(device, config)

        print("\n" + "=" * 50)
        print("全ての例が完了しました！")

        # デバイス情報表示
        print(f"\nデバイス情報:")
        print(f"  名前: {device.name}")
        print(f"  マスタークロック: {config.master_clock_frequency/1000000:.3f} MHz")
        print(f"  ストローブ周波数: {config.strobe_frequency:.0f} Hz")

        # パフォーマンス統計
        summary = benchmark_generator(device, 20000, runs=1)
        print(f"  スループット: {summary['avg_ticks_per_second']:,.0f} ticks/s")
        print(f"  メモリ使用量: {summary['max_memory_usage']:.1f} MB")

    except KeyboardInterrupt:
        print("\n\n中断されました")

    finally:
        print("リソースをクリーンアップ中...")
        if 'device' in locals():
            device.reset()


if __name__ == "__main__":
    main()
