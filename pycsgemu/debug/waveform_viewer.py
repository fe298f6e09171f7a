"""
波形ビューアモジュール

記録したティックトレースの出力波形と内部信号をオシロスコープ風に表示します。
GUIに依存しないmatplotlibのFigure APIで描画するため、
ヘッドレス環境でのPNG/SVG出力にも使用できます。
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union
import numpy as np
from matplotlib.figure import Figure
from ..core.types import CSGError
from ..trace.recorder import TickTrace


class WaveformViewerError(CSGError):
    """波形ビューア関連のエラー"""
    pass


# 信号ごとの表示色
SIGNAL_COLORS = {
    'output': 'black',
    'magnitude': 'purple',
    'sawtooth': 'orange',
    'pitch': 'brown',
    'vco': 'red',
    'vco2': 'salmon',
    'noise': 'gray',
    'slf': 'green',
    'one_shot': 'blue',
    'envelope_bit': 'teal',
    'mixer_output': 'olive',
    'strobe': 'cyan',
}

DEFAULT_SIGNALS = ['output', 'magnitude', 'one_shot', 'mixer_output']


def _select_window(length: int, start: int, end: Optional[int]) -> slice:
    if end is None or end > length:
        end = length
    if start < 0 or start > end:
        raise WaveformViewerError(f"Invalid tick window [{start}, {end}) for trace of {length} ticks")
    return slice(start, end)


def plot_trace(trace: TickTrace, signals: Optional[Sequence[str]] = None,
               start: int = 0, end: Optional[int] = None,
               title: Optional[str] = None) -> Figure:
    """トレースを信号ごとのサブプロットとして描画

    Args:
        trace: 表示するトレース
        signals: 表示する信号名 (Noneなら記録済みの既定信号)
        start: 表示開始ティック
        end: 表示終了ティック (排他、Noneなら末尾まで)
        title: 図のタイトル

    Returns:
        matplotlib Figure

    Raises:
        WaveformViewerError: 信号が存在しない、または範囲が無効な場合
    """
    if signals is None:
        signals = [name for name in DEFAULT_SIGNALS
                   if name == 'output' or name in trace.probes]

    signals = list(signals)
    if not signals:
        raise WaveformViewerError("No signals to plot")

    missing = [name for name in signals if name != 'output' and name not in trace.probes]
    if missing:
        raise WaveformViewerError(f"Signals not recorded in trace: {missing}")

    window = _select_window(len(trace), start, end)
    ticks = np.arange(window.start, window.stop)

    figure = Figure(figsize=(10, 1.6 * len(signals) + 1), dpi=100)
    axes = figure.subplots(len(signals), 1, sharex=True, squeeze=False)[:, 0]

    for ax, name in zip(axes, signals):
        values = trace.signal(name)[window]
        color = SIGNAL_COLORS.get(name, 'black')

        if values.dtype == np.bool_:
            # デジタル信号はステップ表示
            ax.step(ticks, values.astype(np.uint8), where='post', color=color, linewidth=1.0)
            ax.set_ylim(-0.2, 1.2)
            ax.set_yticks([0, 1])
        else:
            ax.plot(ticks, values, color=color, linewidth=1.0)

        ax.set_ylabel(name, rotation=0, ha='right', va='center')
        ax.grid(True, alpha=0.3)

    axes[-1].set_xlabel('Master tick')
    figure.suptitle(title or f"SN76477 CSG trace ({len(ticks)} ticks)")
    figure.tight_layout()

    return figure


def save_trace_plot(trace: TickTrace, path: Union[str, Path],
                    signals: Optional[Sequence[str]] = None,
                    start: int = 0, end: Optional[int] = None) -> Path:
    """トレースを描画して画像ファイルに保存

    Args:
        trace: 表示するトレース
        path: 出力ファイルパス (拡張子で形式を決定)
        signals: 表示する信号名
        start: 表示開始ティック
        end: 表示終了ティック

    Returns:
        保存したファイルパス
    """
    figure = plot_trace(trace, signals=signals, start=start, end=end)
    path = Path(path)
    try:
        figure.savefig(path)
    except OSError as e:
        raise WaveformViewerError(f"Failed to save plot to {path}: {e}") from e
    return path


def signal_statistics(trace: TickTrace, signals: Optional[List[str]] = None) -> dict:
    """信号ごとの統計情報を取得

    Returns:
        信号名をキーとする統計辞書 (min, max, mean, transitions)
    """
    if signals is None:
        signals = ['output'] + sorted(trace.probes)

    stats = {}
    for name in signals:
        values = trace.signal(name).astype(np.int64)
        if len(values) == 0:
            stats[name] = {'min': 0, 'max': 0, 'mean': 0.0, 'transitions': 0}
            continue
        stats[name] = {
            'min': int(values.min()),
            'max': int(values.max()),
            'mean': float(values.mean()),
            'transitions': int(np.count_nonzero(np.diff(values)))
        }
    return stats
