"""
SN76477 CSG エミュレータ - SLF (超低周波発振器)

このモジュールは、2つの境界で向きが反転するのこぎり波ランプと、
その向きを出力とする矩形波を生成するSLFを実装します。
"""

from .types import SlfState, InvalidValueError, VCO_MIN, MASK_14BIT


class SlfOscillator:
    """のこぎり波/矩形波SLF

    毎マスターティック:
        1. サイクルカウンタが非ゼロなら減算
        2. ゼロならslf_step_intervalを再ロードし、のこぎり波を現在の向きに1ステップ進める
        3. ステップ後の値が上限以上なら下降へ、vco_min以下なら上昇へ反転

    下限にVCO最小ピッチ (vco_min) を共有しているのは、SLF駆動の周波数変調が
    VCOの制御可能なピッチ範囲全体をカバーするためです。

    Attributes:
        _step_interval: ステップ間隔 (再ロード値)
        _upper_bound: のこぎり波上限
        _lower_bound: のこぎり波下限 (vco_min)
        _state: 現在のSLF状態
    """

    def __init__(self, step_interval: int, upper_bound: int, lower_bound: int = VCO_MIN):
        """SLFを初期化

        Args:
            step_interval: ステップ間隔 (0以上)
            upper_bound: のこぎり波上限
            lower_bound: のこぎり波下限

        Raises:
            InvalidValueError: パラメータが無効な場合
        """
        if step_interval < 0:
            raise InvalidValueError(f"SLF step interval must be non-negative, got {step_interval}")

        if not (0 <= lower_bound < upper_bound <= MASK_14BIT):
            raise InvalidValueError(
                f"SLF bounds [{lower_bound}, {upper_bound}] must satisfy 0 <= lower < upper <= {MASK_14BIT}")

        self._step_interval = step_interval
        self._upper_bound = upper_bound
        self._lower_bound = lower_bound
        self._state = self.initial_state()

    @staticmethod
    def initial_state() -> SlfState:
        """リセット時の状態 (のこぎり波0、上昇)"""
        return SlfState()

    def next_state(self, state: SlfState) -> SlfState:
        """次ティックの状態を計算（純関数）"""
        if state.cycle_counter != 0:
            return SlfState(
                cycle_counter=state.cycle_counter - 1,
                sawtooth=state.sawtooth,
                direction_up=state.direction_up
            )

        if state.direction_up:
            sawtooth = (state.sawtooth + 1) & MASK_14BIT
        else:
            sawtooth = (state.sawtooth - 1) & MASK_14BIT

        direction_up = state.direction_up
        if sawtooth >= self._upper_bound:
            direction_up = False
        elif sawtooth <= self._lower_bound:
            direction_up = True

        return SlfState(
            cycle_counter=self._step_interval,
            sawtooth=sawtooth,
            direction_up=direction_up
        )

    @staticmethod
    def square_of(state: SlfState) -> bool:
        """指定状態の矩形波出力"""
        return state.direction_up

    def commit(self, state: SlfState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> SlfState:
        return self._state

    @property
    def upper_bound(self) -> int:
        return self._upper_bound

    @property
    def lower_bound(self) -> int:
        return self._lower_bound

    def get_square_output(self) -> bool:
        """現在の矩形波出力を取得"""
        return self._state.direction_up

    def get_sawtooth(self) -> int:
        """現在ののこぎり波振幅を取得"""
        return self._state.sawtooth

    def reset(self) -> None:
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return (f"SlfOscillator(sawtooth={self._state.sawtooth}, "
                f"up={self._state.direction_up}, "
                f"bounds=[{self._lower_bound}, {self._upper_bound}], "
                f"interval={self._step_interval})")
