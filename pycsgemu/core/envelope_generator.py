"""
SN76477 CSG エミュレータ - エンベロープジェネレータ

このモジュールは、エンベロープ信号源を選ぶEnvelopeSelectorと、
選択された2値信号を14ビット振幅に積分するEnvelopeShaperを実装します。
アタックは複数単位の増分、ディケイは小さな減分で、
ハードウェアの速いアタック/遅いディケイ形状を再現します。
"""

from .types import (
    EnvelopeState,
    EnvelopeSelect,
    InvalidValueError,
    ENVELOPE_SATURATION_MASK,
    MAX_ATTACK_STEP,
    MASK_14BIT,
)


class EnvelopeSelector:
    """エンベロープ信号源セレクタ (組み合わせ回路)

    エンコーディング:
        00 = VCO矩形波
        01 = 常時オン (ミキサーのみモード)
        10 = ワンショット出力
        11 = VCO交互サイクル出力
    """

    ENVELOPE_SOURCES = {
        EnvelopeSelect.VCO: "VCO",
        EnvelopeSelect.MIXER_ONLY: "Mixer only (always on)",
        EnvelopeSelect.ONE_SHOT: "One-shot",
        EnvelopeSelect.VCO_ALTERNATING: "VCO alternating cycles",
    }

    @staticmethod
    def select(envelope_select: int, vco: bool, one_shot: bool, vco2: bool) -> bool:
        """エンベロープ信号を選択

        Args:
            envelope_select: 2ビット選択コード (上位ビットはマスク)
            vco: VCO矩形波出力
            one_shot: ワンショット出力
            vco2: VCO交互サイクル出力

        Returns:
            選択されたエンベロープ信号
        """
        code = EnvelopeSelect(int(envelope_select) & 0x3)
        if code == EnvelopeSelect.VCO:
            return vco
        if code == EnvelopeSelect.MIXER_ONLY:
            return True
        if code == EnvelopeSelect.ONE_SHOT:
            return one_shot
        return vco2

    @classmethod
    def describe(cls, envelope_select: int) -> str:
        """選択コードの説明を取得"""
        return cls.ENVELOPE_SOURCES[EnvelopeSelect(int(envelope_select) & 0x3)]


class EnvelopeShaper:
    """14ビットエンベロープシェイパ

    ストローブごとに:
        - プリスケーラが0なら1ステップ実行し、現在の方向の間隔-1を再ロード
        - そうでなければプリスケーラを減算
    1ステップ:
        - 選択信号がTrue: 上位3ビットが全て1でなければ attack_step を加算
        - 選択信号がFalse: decay_step を減算 (0で停止)

    間隔が1の場合プリスケーラは常に0で、毎ストローブ1ステップになります。

    Attributes:
        _attack_step: アタック増分
        _attack_interval: アタックステップ間のストローブ数
        _decay_step: ディケイ減分
        _decay_interval: ディケイステップ間のストローブ数
        _state: 現在のエンベロープ状態
    """

    def __init__(self, attack_step: int, decay_step: int = 1,
                 attack_interval: int = 1, decay_interval: int = 1):
        """エンベロープシェイパを初期化

        Raises:
            InvalidValueError: パラメータが無効な場合
        """
        if not (1 <= attack_step <= MAX_ATTACK_STEP):
            raise InvalidValueError(f"Attack step {attack_step} out of range [1, {MAX_ATTACK_STEP}]")

        if not (1 <= decay_step <= MASK_14BIT):
            raise InvalidValueError(f"Decay step {decay_step} out of range [1, {MASK_14BIT}]")

        if attack_interval < 1 or decay_interval < 1:
            raise InvalidValueError(
                f"Envelope intervals must be >= 1, got attack={attack_interval}, decay={decay_interval}")

        self._attack_step = attack_step
        self._decay_step = decay_step
        self._attack_interval = attack_interval
        self._decay_interval = decay_interval
        self._state = self.initial_state()

    @staticmethod
    def initial_state() -> EnvelopeState:
        """リセット時の状態"""
        return EnvelopeState()

    @staticmethod
    def is_saturated(magnitude: int) -> bool:
        """上位3ビットが全て立っているか (アタック完了)"""
        return (magnitude & ENVELOPE_SATURATION_MASK) == ENVELOPE_SATURATION_MASK

    def next_state(self, state: EnvelopeState, envelope_bit: bool, strobe: bool) -> EnvelopeState:
        """次ティックの状態を計算（純関数）

        Args:
            state: 現在の状態
            envelope_bit: EnvelopeSelectorの出力
            strobe: ストローブ入力

        Returns:
            次の状態
        """
        if not strobe:
            return state

        if state.prescaler != 0:
            return EnvelopeState(magnitude=state.magnitude, prescaler=state.prescaler - 1)

        magnitude = state.magnitude
        if envelope_bit:
            if not self.is_saturated(magnitude):
                magnitude += self._attack_step
            prescaler = self._attack_interval - 1
        else:
            magnitude = max(0, magnitude - self._decay_step)
            prescaler = self._decay_interval - 1

        return EnvelopeState(magnitude=magnitude, prescaler=prescaler)

    def commit(self, state: EnvelopeState) -> None:
        """新しい状態を確定"""
        self._state = state

    @property
    def state(self) -> EnvelopeState:
        return self._state

    @property
    def saturation_limit(self) -> int:
        """到達しうる振幅の上限"""
        return ENVELOPE_SATURATION_MASK - 1 + self._attack_step

    def get_magnitude(self) -> int:
        """現在の14ビット振幅を取得"""
        return self._state.magnitude

    def reset(self) -> None:
        self._state = self.initial_state()

    def __repr__(self) -> str:
        return (f"EnvelopeShaper(magnitude={self._state.magnitude}, "
                f"attack={self._attack_step}/{self._attack_interval}, "
                f"decay={self._decay_step}/{self._decay_interval})")
