"""
SN76477 CSG エミュレータ - ワンショット

inhibit入力の立ち下がりエッジで固定長パルスを生成し、
エンベロープのアタック区間を切り出します。
"""

from .types import OneShotState, InvalidValueError, ONE_SHOT_DURATION, MASK_11BIT


class OneShotGate:
    """11ビットワンショットゲート

    毎マスターティック:
        - delayed_inhibit に今回のinhibitを記録
        - inhibitが今回False・前回Trueなら (立ち下がり) カウンタにdurationをロード
        - それ以外でカウンタが非ゼロかつストローブならカウンタを減算
        - 出力は「前ティックのカウンタが非ゼロ」をレジスタ化した値 (1ティック遅延)

    Attributes:
        _duration: パルス長 (ストローブ数)
        _state: 現在のワンショット状態
    """

    def __init__(self, duration: int = ONE_SHOT_DURATION):
        if not (1 <= duration <= MASK_11BIT):
            raise InvalidValueError(f"One-shot duration {duration} out of range [1, {MASK_11BIT}]")

        self._duration = duration
        self._state = self.initial_state()

    @staticmethod
    def initial_state() -> OneShotState:
        """リセット時の状態"""
        return OneShotState()

    def next_state(self, state: OneShotState, inhibit: bool, strobe: bool) -> OneShotState:
        """次ティックの状態を計算（純関数）

        Args:
            state: 現在の状態
            inhibit: 今回のinhibit入力
            strobe: ストローブ入力

        Returns:
            次の状態
        """
        counter = state.counter
        if not inhibit and state.delayed_inhibit:
            counter = self._duration
        elif counter != 0 and strobe:
            counter -= 1

        return OneShotState(
            delayed_inhibit=inhibit,
            counter=counter,
            output=state.counter != 0
        )

    @staticmethod
    def output_of(state: OneShotState) -> bool:
        """指定状態の出力"""
        return state.output

    def commit(self, state: OneShotState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> OneShotState:
        return self._state

    @property
    def duration(self) -> int:
        return self._duration

    def get_output(self) -> bool:
        """現在の出力を取得"""
        return self._state.output

    def is_armed(self) -> bool:
        """カウンタが動作中かどうか"""
        return self._state.counter != 0

    def reset(self) -> None:
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return (f"OneShotGate(counter={self._state.counter}, "
                f"output={self._state.output}, "
                f"delayed_inhibit={self._state.delayed_inhibit})")
