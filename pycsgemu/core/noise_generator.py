"""
SN76477 CSG エミュレータ - ノイズジェネレータ

このモジュールは、CSGのノイズ源として使用される
16ビットLFSRベースのノイズジェネレータを実装します。
"""

from typing import List
from .types import NoiseState, InvalidValueError, LFSR_INITIAL_VALUE, NOISE_TAP_MASK, MASK_16BIT
from ..utils.lfsr import lfsr_step


class NoiseGenerator:
    """16ビットLFSRノイズジェネレータ

    設計方針:
        - ストローブ (約48kHz) ごとにLFSRを1ステップ進める
        - ストローブ生成はコア側のClockDividerが管理
        - LFSRのビット15がノイズ出力となる
        - 設定項目はなく、シードが同じなら出力列は決定的

    Attributes:
        _seed: LFSR初期値
        _tap_mask: タップマスク
        _state: 現在のノイズ状態
    """

    def __init__(self, seed: int = LFSR_INITIAL_VALUE, tap_mask: int = NOISE_TAP_MASK):
        """ノイズジェネレータを初期化

        Args:
            seed: LFSR初期値 (1-65535)
            tap_mask: タップマスク

        Raises:
            InvalidValueError: シードが無効な場合
        """
        if not (0 < seed <= MASK_16BIT):
            raise InvalidValueError(f"Noise seed {seed} out of range [1, {MASK_16BIT}]")

        self._seed = seed
        self._tap_mask = tap_mask
        self._state = self.initial_state()

    def initial_state(self) -> NoiseState:
        """リセット時の状態"""
        return NoiseState(lfsr=self._seed)

    def next_state(self, state: NoiseState, strobe: bool) -> NoiseState:
        """次ティックの状態を計算（純関数）

        Args:
            state: 現在の状態
            strobe: ストローブ入力

        Returns:
            次の状態 (ストローブがなければ同一値)
        """
        if not strobe:
            return state
        return NoiseState(lfsr=lfsr_step(state.lfsr, self._tap_mask))

    @staticmethod
    def output_of(state: NoiseState) -> bool:
        """指定状態のノイズ出力 (ビット15)"""
        return bool(state.lfsr & 0x8000)

    def commit(self, state: NoiseState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> NoiseState:
        return self._state

    def get_output(self) -> bool:
        """現在のノイズ出力を取得"""
        return self.output_of(self._state)

    def get_lfsr_state(self) -> int:
        """現在のLFSR値を取得"""
        return self._state.lfsr

    def reset(self) -> None:
        """ノイズジェネレータをリセット"""
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return (f"NoiseGenerator(lfsr=0x{self._state.lfsr:04X}, "
                f"output={self.get_output()})")


# =============================================================================
# ユーティリティ関数
# =============================================================================

def analyze_noise_balance(sequence: List[bool]) -> dict:
    """ノイズビット列の統計を計算

    Args:
        sequence: ノイズビット列

    Returns:
        ランダム性統計情報
    """
    sample_size = len(sequence)
    if sample_size == 0:
        raise InvalidValueError("Noise sequence must not be empty")

    ones_count = sum(sequence)
    ones_ratio = ones_count / sample_size

    # 連続長
    runs = []
    current_run = 1
    for i in range(1, sample_size):
        if sequence[i] == sequence[i-1]:
            current_run += 1
        else:
            runs.append(current_run)
            current_run = 1
    runs.append(current_run)

    return {
        'sample_size': sample_size,
        'ones_count': ones_count,
        'zeros_count': sample_size - ones_count,
        'ones_ratio': ones_ratio,
        'balance_score': abs(0.5 - ones_ratio),
        'runs_count': len(runs),
        'average_run_length': sum(runs) / len(runs),
        'max_run_length': max(runs)
    }
