"""
SN76477 CSG エミュレータ - VCO (ピッチ制御発振器)

このモジュールは、14ビットダウンカウンタベースの矩形波ジェネレータを実装します。
"""

from .types import VcoState, InvalidValueError, MASK_14BIT


class VcoOscillator:
    """14ビットVCO

    設計方針:
        - 毎マスターティック更新 (ストローブは使用しない)
        - カウンタが非ゼロなら減算、ゼロならピッチを再ロードし2ビット位相を+1
        - vco  = 位相ビット0 (再ロードごとにトグル)
        - vco2 = 位相ビット0 AND ビット1 (1回おきのパルス)
        - ピッチはコア側が毎ティック計算して与える (固定値またはSLFのこぎり波)

    周波数:
        F_vco = F_clock / (pitch + 1) / 2
    """

    def __init__(self):
        self._state = self.initial_state()

    @staticmethod
    def initial_state() -> VcoState:
        """リセット時の状態"""
        return VcoState()

    @staticmethod
    def next_state(state: VcoState, pitch: int) -> VcoState:
        """次ティックの状態を計算（純関数）

        Args:
            state: 現在の状態
            pitch: 14ビットピッチ (範囲外はマスク)

        Returns:
            次の状態
        """
        if state.counter != 0:
            return VcoState(counter=state.counter - 1, phase=state.phase)

        return VcoState(counter=pitch & MASK_14BIT, phase=(state.phase + 1) & 0x3)

    @staticmethod
    def vco_of(state: VcoState) -> bool:
        """指定状態の矩形波出力"""
        return bool(state.phase & 0x1)

    @staticmethod
    def vco2_of(state: VcoState) -> bool:
        """指定状態の交互サイクル出力"""
        return (state.phase & 0x3) == 0x3

    def commit(self, state: VcoState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> VcoState:
        return self._state

    def get_output(self) -> bool:
        """現在の矩形波出力を取得"""
        return self.vco_of(self._state)

    def get_alternate_output(self) -> bool:
        """現在の交互サイクル出力を取得"""
        return self.vco2_of(self._state)

    def reset(self) -> None:
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return (f"VcoOscillator(counter={self._state.counter}, "
                f"phase={self._state.phase}, "
                f"vco={self.get_output()}, vco2={self.get_alternate_output()})")


# =============================================================================
# ユーティリティ関数
# =============================================================================

def calculate_pitch_from_frequency(frequency_hz: float, master_clock_hz: float) -> int:
    """目標周波数からピッチ値を計算

    Args:
        frequency_hz: 目標周波数 (Hz)
        master_clock_hz: マスタークロック周波数 (Hz)

    Returns:
        ピッチ値 (0-16383にクランプ)

    Raises:
        InvalidValueError: 周波数が無効な場合
    """
    if frequency_hz <= 0:
        raise InvalidValueError(f"Frequency must be positive, got {frequency_hz}")

    if master_clock_hz <= 0:
        raise InvalidValueError(f"Master clock frequency must be positive, got {master_clock_hz}")

    # pitch = F_clock / (2 * F_vco) - 1
    pitch = int(round(master_clock_hz / (2.0 * frequency_hz))) - 1
    return max(0, min(MASK_14BIT, pitch))
