"""
SN76477 CSG エミュレータ - 線形帰還シフトレジスタ (LFSR)

このモジュールは、CSGのノイズジェネレータで使用される
16ビット左シフト・ガロア型LFSRの実装を提供します。
デフォルトのフィードバック多項式: x^16 + x^14 + x^13 + x^11 + 1
"""

from typing import List, Optional
from ..core.types import InvalidValueError, LFSR_INITIAL_VALUE, NOISE_TAP_MASK, MASK_16BIT


def lfsr_step(value: int, tap_mask: int = NOISE_TAP_MASK) -> int:
    """LFSRを1ステップ進めた値を計算（純関数）

    1. 現在値が全ビット0なら最下位ビットに1を注入する
    2. 左に1ビットシフト
    3. シフトアウトしたビット15が1ならタップマスクとXOR

    Args:
        value: 現在の16ビット値
        tap_mask: タップマスク

    Returns:
        次の16ビット値
    """
    feedback_in = 1 if value == 0 else 0
    shifted = ((value << 1) | feedback_in) & MASK_16BIT
    if value & 0x8000:
        shifted ^= tap_mask
    return shifted


class LFSR:
    """16ビット線形帰還シフトレジスタ

    ノイズビット列生成用の状態を持つラッパー。出力は最上位ビット (ビット15)。
    タップマスクのビット0が立っていれば、非ゼロの値から
    全ビット0に遷移することはありません。

    Attributes:
        _value: 現在のLFSR値 (16ビット)
        _tap_mask: タップマスク
    """

    INITIAL_VALUE = LFSR_INITIAL_VALUE

    MASK_16BIT = MASK_16BIT

    def __init__(self, initial_value: Optional[int] = None, tap_mask: int = NOISE_TAP_MASK):
        """LFSRを初期化

        Args:
            initial_value: 初期値 (Noneの場合は全ビット1)
            tap_mask: タップマスク

        Raises:
            InvalidValueError: 初期値が無効な場合
        """
        if initial_value is None:
            initial_value = self.INITIAL_VALUE

        if not (0 < initial_value <= self.MASK_16BIT):
            raise InvalidValueError(f"LFSR initial value {initial_value} out of range [1, {self.MASK_16BIT}]")

        self._value = initial_value
        self._tap_mask = tap_mask

    def step(self) -> bool:
        """LFSRを1ステップ進める

        Returns:
            更新後のビット15の値
        """
        self._value = lfsr_step(self._value, self._tap_mask)
        return self.get_output()

    def get_output(self) -> bool:
        """現在の出力ビット（ビット15）を取得"""
        return bool(self._value & 0x8000)

    def get_value(self) -> int:
        """現在のLFSR値を取得"""
        return self._value

    def __repr__(self) -> str:
        return f"LFSR(value=0x{self._value:04X}, taps=0x{self._tap_mask:04X})"


# =============================================================================
# ユーティリティ関数
# =============================================================================

def measure_lfsr_period(seed: int = LFSR_INITIAL_VALUE, tap_mask: int = NOISE_TAP_MASK,
                        max_steps: int = 1 << 17) -> int:
    """LFSRの実際の周期を測定

    Args:
        seed: 開始値
        tap_mask: タップマスク
        max_steps: 最大測定ステップ数

    Returns:
        検出された周期長（max_stepsに達した場合は-1）
    """
    value = seed
    for step in range(1, max_steps + 1):
        value = lfsr_step(value, tap_mask)
        if value == seed:
            return step

    return -1


def generate_noise_sequence(length: int, seed: Optional[int] = None,
                            tap_mask: int = NOISE_TAP_MASK) -> List[bool]:
    """ノイズビット列を生成

    Args:
        length: 生成するシーケンスの長さ
        seed: LFSRのシード値

    Returns:
        ノイズビットのリスト
    """
    lfsr = LFSR(seed, tap_mask)
    return [lfsr.step() for _ in range(length)]
