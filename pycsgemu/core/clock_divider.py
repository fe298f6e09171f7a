"""
SN76477 CSG エミュレータ - クロック分周器

マスターティックから約48kHzのストローブ (イネーブルパルス) を生成します。
"""

from .types import ClockDividerState, DEFAULT_DIVIDER_BITS, InvalidValueError


class ClockDivider:
    """9ビットクロック分周器

    下位9ビットを毎ティック+1し、桁上がりをビット9 (最上位ビット) に残します。
    ストローブはこのキャリービットで、512ティックに1回、1ティック幅で立ちます。

        counter: 0, 1, ..., 511, 512(strobe), 1, 2, ..., 511, 512(strobe), ...

    Attributes:
        _bits: 分周器のビット幅
        _state: 現在の分周器状態
    """

    def __init__(self, bits: int = DEFAULT_DIVIDER_BITS):
        if bits < 1:
            raise InvalidValueError(f"Divider bits must be positive, got {bits}")

        self._bits = bits
        self._mask = (1 << bits) - 1
        self._state = ClockDividerState()

    @staticmethod
    def initial_state() -> ClockDividerState:
        """リセット時の状態"""
        return ClockDividerState()

    def next_state(self, state: ClockDividerState) -> ClockDividerState:
        """次ティックの状態を計算（純関数）"""
        return ClockDividerState(counter=(state.counter & self._mask) + 1)

    def strobe_of(self, state: ClockDividerState) -> bool:
        """指定状態のストローブ (キャリービット)"""
        return bool(state.counter >> self._bits)

    def commit(self, state: ClockDividerState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> ClockDividerState:
        return self._state

    @property
    def strobe(self) -> bool:
        """現在のストローブ出力"""
        return self.strobe_of(self._state)

    @property
    def period(self) -> int:
        """ストローブ周期 (マスターティック数)"""
        return 1 << self._bits

    def reset(self) -> None:
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return f"ClockDivider(bits={self._bits}, counter={self._state.counter}, strobe={self.strobe})"
