"""
ティックトレース記録モジュール

SoundGeneratorを制御スケジュールに従って実行し、
出力サンプルと内部信号 (プローブ) をティック単位でNumPy配列に記録します。
キャプチャしたリファレンストレースとのビット単位比較に使用します。
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Sequence, Union
import numpy as np
from ..core.sound_generator import SoundGenerator
from .schedule import ControlSchedule, TraceError


# プローブ名とNumPy型
PROBE_SIGNALS: Dict[str, Any] = {
    'strobe': np.bool_,
    'vco': np.bool_,
    'vco2': np.bool_,
    'noise': np.bool_,
    'slf': np.bool_,
    'one_shot': np.bool_,
    'envelope_bit': np.bool_,
    'mixer_output': np.bool_,
    'pitch': np.uint16,
    'sawtooth': np.uint16,
    'magnitude': np.uint16,
}


@dataclass
class TickTrace:
    """ティックトレース

    Attributes:
        output: 出力サンプル (uint16)
        probes: プローブ名をキーとする信号配列
        metadata: 設定などの付帯情報
    """
    output: np.ndarray
    probes: Dict[str, np.ndarray] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """初期化後の検証"""
        self.output = np.asarray(self.output, dtype=np.uint16)
        for name, values in self.probes.items():
            if len(values) != len(self.output):
                raise TraceError(
                    f"Probe '{name}' length {len(values)} does not match output length {len(self.output)}")

    def __len__(self) -> int:
        return len(self.output)

    @property
    def duration(self) -> float:
        """トレース長 (秒)。マスタークロック情報がなければ0.0"""
        clock = self.metadata.get('master_clock_frequency')
        if not clock:
            return 0.0
        return len(self.output) / clock

    def signal(self, name: str) -> np.ndarray:
        """名前で信号配列を取得 ('output' またはプローブ名)

        Raises:
            TraceError: 信号が存在しない場合
        """
        if name == 'output':
            return self.output
        if name not in self.probes:
            raise TraceError(f"Signal '{name}' not recorded, available: {['output'] + sorted(self.probes)}")
        return self.probes[name]

    def save(self, path: Union[str, Path]) -> Path:
        """NumPy .npz 形式で保存

        拡張子が .npz でなければ付加します (np.savez_compressed と同じ規則)。

        Returns:
            実際に書き込んだファイルパス

        Raises:
            TraceError: 書き込みに失敗した場合
        """
        path = Path(path)
        if path.suffix != '.npz':
            path = path.with_name(path.name + '.npz')

        arrays = {'output': self.output}
        for name, values in self.probes.items():
            arrays[f"probe_{name}"] = values
        arrays['metadata'] = np.array(json.dumps(self.metadata))

        try:
            np.savez_compressed(path, **arrays)
        except OSError as e:
            raise TraceError(f"Failed to save trace to {path}: {e}") from e

        return path

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'TickTrace':
        """NumPy .npz 形式から読み込み

        パスが存在せず .npz を付加したファイルがあればそちらを読み込みます。

        Raises:
            TraceError: 読み込みに失敗した場合
        """
        path = Path(path)
        if not path.exists() and path.suffix != '.npz':
            candidate = path.with_name(path.name + '.npz')
            if candidate.exists():
                path = candidate

        try:
            with np.load(path, allow_pickle=False) as data:
                if 'output' not in data.files:
                    raise TraceError(f"Trace file {path} has no 'output' array")

                output = data['output']
                probes = {name[len('probe_'):]: data[name]
                          for name in data.files if name.startswith('probe_')}
                metadata = json.loads(str(data['metadata'][()])) if 'metadata' in data.files else {}
        except (OSError, ValueError) as e:
            raise TraceError(f"Failed to load trace from {path}: {e}") from e

        return cls(output=output, probes=probes, metadata=metadata)

    def __repr__(self) -> str:
        return f"TickTrace(ticks={len(self.output)}, probes={sorted(self.probes)})"


def render_trace(generator: SoundGenerator, schedule: Optional[ControlSchedule], num_ticks: int,
                 probes: Union[bool, Sequence[str]] = True) -> TickTrace:
    """スケジュールに従ってジェネレータを実行しトレースを記録

    ジェネレータはリセットされ、スケジュールの初期制御入力から開始します。

    Args:
        generator: 実行するSoundGenerator
        schedule: 制御スケジュール (Noneなら現在の設定で初期化のみ)
        num_ticks: 記録するティック数
        probes: True=全プローブ、False=出力のみ、またはプローブ名のリスト

    Returns:
        記録したトレース

    Raises:
        TraceError: パラメータが無効な場合
    """
    if num_ticks < 0:
        raise TraceError(f"num_ticks must be non-negative, got {num_ticks}")

    if probes is True:
        probe_names = list(PROBE_SIGNALS)
    elif probes is False:
        probe_names = []
    else:
        probe_names = list(probes)
        unknown = set(probe_names) - set(PROBE_SIGNALS)
        if unknown:
            raise TraceError(f"Unknown probes {sorted(unknown)}, expected {list(PROBE_SIGNALS)}")

    if schedule is None:
        schedule = ControlSchedule(initial_controls=generator.get_controls())

    generator.reset()
    generator.set_controls(schedule.initial_controls)
    events = schedule.by_tick()

    output = np.zeros(num_ticks, dtype=np.uint16)
    recorded = {name: np.zeros(num_ticks, dtype=PROBE_SIGNALS[name]) for name in probe_names}

    reset_until = 0
    for t in range(num_ticks):
        for event in events.get(t, ()):
            if event.changes:
                generator.write_control(**event.changes)
            if event.reset_ticks:
                reset_until = max(reset_until, t + event.reset_ticks)

        output[t] = generator.step(reset=t < reset_until)

        if probe_names:
            signals = generator.get_signals()
            for name in probe_names:
                if name == 'sawtooth':
                    recorded[name][t] = generator.slf.get_sawtooth()
                elif name == 'magnitude':
                    recorded[name][t] = generator.envelope_shaper.get_magnitude()
                else:
                    recorded[name][t] = getattr(signals, name)

    config = generator.get_config()
    metadata = {
        'num_ticks': num_ticks,
        'master_clock_frequency': config.master_clock_frequency,
        'divider_bits': config.divider_bits,
        'slf_step_interval': config.slf_step_interval,
        'slf_upper_bound': config.slf_upper_bound,
        'attack_step': config.attack_step,
        'attack_interval': config.attack_interval,
        'decay_step': config.decay_step,
        'decay_interval': config.decay_interval,
        'schedule': schedule.to_dict()
    }

    return TickTrace(output=output, probes=recorded, metadata=metadata)
