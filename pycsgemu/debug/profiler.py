"""
性能プロファイラモジュール

SoundGeneratorのティック処理スループット、実時間比、
プロセスのメモリ使用量 (RSS) を計測します。
"""

import os
import time
from collections import deque
from dataclasses import dataclass
from typing import Dict, Any, Optional
import numpy as np
import psutil
from ..core.types import CSGError, ControlInputs
from ..core.sound_generator import SoundGenerator


class ProfilerError(CSGError):
    """プロファイラ関連のエラー"""
    pass


@dataclass
class PerformanceMetrics:
    """性能メトリクス"""
    ticks: int
    processing_time: float
    ticks_per_second: float
    realtime_ratio: float
    cpu_usage: float
    memory_usage: float
    timestamp: float


class PerformanceProfiler:
    """性能プロファイラ

    start_profiling() と stop_profiling() の間に実行したティック数から
    スループットを求めます。実時間比はマスタークロック周波数に対する比率です。
    """

    def __init__(self, master_clock_frequency: float, history_size: int = 100):
        if master_clock_frequency <= 0:
            raise ProfilerError(f"master_clock_frequency must be positive, got {master_clock_frequency}")

        self.master_clock_frequency = master_clock_frequency
        self.metrics_history = deque(maxlen=history_size)
        self.start_time: Optional[float] = None
        self.process = psutil.Process(os.getpid())

    def start_profiling(self) -> None:
        """プロファイリング開始"""
        # cpu_percentの基準点を更新
        self.process.cpu_percent()
        self.start_time = time.perf_counter()

    def stop_profiling(self, ticks: int) -> PerformanceMetrics:
        """プロファイリング終了

        Args:
            ticks: 計測区間で実行したティック数
        """
        if self.start_time is None:
            raise ProfilerError("Profiling not started")

        processing_time = time.perf_counter() - self.start_time
        self.start_time = None

        ticks_per_second = ticks / processing_time if processing_time > 0 else 0.0

        metrics = PerformanceMetrics(
            ticks=ticks,
            processing_time=processing_time,
            ticks_per_second=ticks_per_second,
            realtime_ratio=ticks_per_second / self.master_clock_frequency,
            cpu_usage=self.process.cpu_percent(),
            memory_usage=self.process.memory_info().rss / 1024 / 1024,  # MB
            timestamp=time.time()
        )

        self.metrics_history.append(metrics)
        return metrics

    def get_performance_summary(self) -> Dict[str, Any]:
        """性能サマリーを取得"""
        if not self.metrics_history:
            return {}

        metrics = list(self.metrics_history)

        return {
            'runs': len(metrics),
            'total_ticks': int(sum(m.ticks for m in metrics)),
            'avg_ticks_per_second': float(np.mean([m.ticks_per_second for m in metrics])),
            'max_ticks_per_second': float(np.max([m.ticks_per_second for m in metrics])),
            'avg_realtime_ratio': float(np.mean([m.realtime_ratio for m in metrics])),
            'avg_memory_usage': float(np.mean([m.memory_usage for m in metrics])),
            'max_memory_usage': float(np.max([m.memory_usage for m in metrics]))
        }

    def clear(self) -> None:
        """履歴をクリア"""
        self.metrics_history.clear()
        self.start_time = None


def benchmark_generator(generator: SoundGenerator, num_ticks: int, runs: int = 3,
                        controls: Optional[ControlInputs] = None) -> Dict[str, Any]:
    """SoundGeneratorのティック処理性能を計測

    Args:
        generator: 計測対象
        num_ticks: 1回あたりのティック数
        runs: 計測回数
        controls: 計測中の制御入力 (Noneならinhibit解除・VCO出力)

    Returns:
        性能サマリー辞書
    """
    if num_ticks <= 0 or runs <= 0:
        raise ProfilerError(f"num_ticks and runs must be positive, got {num_ticks}, {runs}")

    if controls is None:
        controls = ControlInputs(inhibit=False)

    profiler = PerformanceProfiler(generator.get_config().master_clock_frequency)

    for _ in range(runs):
        generator.reset()
        generator.set_controls(controls)
        profiler.start_profiling()
        generator.run(num_ticks)
        profiler.stop_profiling(num_ticks)

    return profiler.get_performance_summary()
