"""
PyCSGEmu - デバッグ機能

このモジュールは、CSGエミュレータのデバッグ機能を提供します。

主要コンポーネント:
- plot_trace / save_trace_plot: ティックトレースの波形表示
- PerformanceProfiler: ティック処理性能の計測
"""

from .waveform_viewer import (
    WaveformViewerError, plot_trace, save_trace_plot, signal_statistics
)
from .profiler import (
    ProfilerError, PerformanceMetrics, PerformanceProfiler, benchmark_generator
)

__all__ = [
    'WaveformViewerError', 'plot_trace', 'save_trace_plot', 'signal_statistics',
    'ProfilerError', 'PerformanceMetrics', 'PerformanceProfiler', 'benchmark_generator'
]
