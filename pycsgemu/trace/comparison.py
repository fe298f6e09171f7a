"""
トレース比較モジュール

期待トレース (キャプチャしたリファレンス) と実行結果を
ティック単位・ビット単位で比較し、最初の不一致位置を報告します。
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence
import numpy as np
from .recorder import TickTrace


@dataclass
class TraceComparison:
    """トレース比較結果

    Attributes:
        compared_ticks: 比較したティック数
        length_mismatch: 長さが異なるかどうか
        first_mismatch: 出力サンプルの最初の不一致ティック
        mismatch_count: 出力サンプルの不一致ティック数
        signal_mismatches: 信号名ごとの最初の不一致ティック
    """
    compared_ticks: int
    length_mismatch: bool = False
    first_mismatch: Optional[int] = None
    mismatch_count: int = 0
    signal_mismatches: Dict[str, int] = field(default_factory=dict)

    @property
    def matches(self) -> bool:
        """完全一致かどうか"""
        return not self.length_mismatch and not self.signal_mismatches

    def summary(self) -> str:
        """一行サマリ"""
        if self.matches:
            return f"MATCH ({self.compared_ticks} ticks)"

        parts = []
        if self.length_mismatch:
            parts.append("length differs")
        if self.first_mismatch is not None:
            parts.append(f"output differs at tick {self.first_mismatch} "
                         f"({self.mismatch_count} ticks total)")
        for name, tick in sorted(self.signal_mismatches.items()):
            if name != 'output':
                parts.append(f"{name} differs at tick {tick}")
        return "MISMATCH: " + ", ".join(parts)


def _first_difference(expected: np.ndarray, actual: np.ndarray) -> Optional[int]:
    diff = np.nonzero(expected != actual)[0]
    return int(diff[0]) if len(diff) else None


def compare_traces(expected: TickTrace, actual: TickTrace,
                   signals: Optional[Sequence[str]] = None) -> TraceComparison:
    """2つのトレースを比較

    Args:
        expected: 期待トレース
        actual: 実行結果トレース
        signals: 比較するプローブ名 (Noneなら両方にあるもの全て)

    Returns:
        比較結果
    """
    n = min(len(expected), len(actual))

    expected_output = expected.output[:n].astype(np.int64)
    actual_output = actual.output[:n].astype(np.int64)
    mismatches = np.nonzero(expected_output != actual_output)[0]

    result = TraceComparison(
        compared_ticks=n,
        length_mismatch=len(expected) != len(actual),
        first_mismatch=int(mismatches[0]) if len(mismatches) else None,
        mismatch_count=int(len(mismatches))
    )
    if result.first_mismatch is not None:
        result.signal_mismatches['output'] = result.first_mismatch

    if signals is None:
        names = sorted(set(expected.probes) & set(actual.probes))
    else:
        names = list(signals)

    for name in names:
        first = _first_difference(expected.signal(name)[:n].astype(np.int64),
                                  actual.signal(name)[:n].astype(np.int64))
        if first is not None:
            result.signal_mismatches[name] = first

    return result
