"""
SN76477 CSG エミュレータ - デバイス設定

このモジュールは、CSGエミュレータのデバイス設定クラスを提供します。
マスタークロック周波数、SLF/エンベロープのレートプリセット、
VCOピッチ定数、デバッグ設定などを管理します。
"""

import math
from dataclasses import dataclass, replace
from typing import Tuple
from .types import (
    InvalidValueError,
    DEFAULT_DIVIDER_BITS,
    VCO_MIN, VCO_MAX,
    MASK_14BIT, MASK_11BIT, MASK_16BIT,
    LFSR_INITIAL_VALUE, NOISE_TAP_MASK,
    ONE_SHOT_DURATION,
    ENVELOPE_SATURATION_MASK, MAX_ATTACK_STEP,
)


# =============================================================================
# レートプリセット表
# =============================================================================

# (slf_step_interval, slf_upper_bound): 173 / 35 / 16 / 3 Hz @ 24.576MHz
SLF_RATE_PRESETS: Tuple[Tuple[int, int], ...] = (
    (22, 4096),
    (48, 8192),
    (49, 16383),
    (266, 16383),
)

# (attack_step, attack_interval): 1.95 / 5.85 / 90 / 270 ms @ 48kHz
ATTACK_RATE_PRESETS: Tuple[Tuple[int, int], ...] = (
    (153, 1),
    (51, 1),
    (10, 3),
    (10, 9),
)

# (decay_step, decay_interval): 21 / 340 / 213 / 1020 ms @ 48kHz
DECAY_RATE_PRESETS: Tuple[Tuple[int, int], ...] = (
    (14, 1),
    (7, 8),
    (7, 5),
    (7, 24),
)

VALID_NOISE_COLORS = ('white', 'pink')


@dataclass
class CSGConfig:
    """CSG設定クラス

    CSGエミュレータの動作パラメータを定義します。
    ティックごとに変化する制御入力 (ControlInputs) とは異なり、
    エンジン生成時に固定される物理定数・レート設定を保持します。

    Attributes:
        device_id: デバイス識別子
        master_clock_frequency: マスターティック周波数 (Hz)
        divider_bits: クロック分周器のビット幅 (ストローブ周期 = 2**bits)
        vco_min: VCO最小ピッチ (SLFのこぎり波の下限と共有)
        vco_max: VCO最大ピッチ (14ビット)
        slf_step_interval: SLFステップ間隔 (マスターティック数 - 1)
        slf_upper_bound: SLFのこぎり波の上限
        vco_pitch_high: 固定ピッチ (vco_pitch_preset=True)
        vco_pitch_low: 固定ピッチ (vco_pitch_preset=False)
        one_shot_duration: ワンショット長 (ストローブ数)
        attack_step: アタック1ステップの増分
        attack_interval: アタックステップ間のストローブ数
        decay_step: ディケイ1ステップの減分
        decay_interval: ディケイステップ間のストローブ数
        noise_tap_mask: LFSRタップマスク (ビット0必須)
        noise_seed: LFSR初期値
        noise_color: ノイズ色 ('white' / 'pink'、コアでは未使用)
        enable_debug: デバッグモード有効化
    """

    # 基本設定
    device_id: str = "sn76477"
    master_clock_frequency: float = 24576000.0  # 24.576MHz → ストローブ48kHz
    divider_bits: int = DEFAULT_DIVIDER_BITS

    # VCO設定
    vco_min: int = VCO_MIN
    vco_max: int = VCO_MAX
    vco_pitch_high: int = 1151   # ≈10,667Hz
    vco_pitch_low: int = MASK_14BIT

    # SLF設定
    slf_step_interval: int = SLF_RATE_PRESETS[0][0]
    slf_upper_bound: int = SLF_RATE_PRESETS[0][1]

    # ワンショット設定
    one_shot_duration: int = ONE_SHOT_DURATION

    # エンベロープ設定 (リファレンス動作: 固定アタック/1ずつ減衰)
    attack_step: int = ATTACK_RATE_PRESETS[0][0]
    attack_interval: int = ATTACK_RATE_PRESETS[0][1]
    decay_step: int = 1
    decay_interval: int = 1

    # ノイズ設定
    noise_tap_mask: int = NOISE_TAP_MASK
    noise_seed: int = LFSR_INITIAL_VALUE
    noise_color: str = 'white'

    # デバッグ設定
    enable_debug: bool = False

    def __post_init__(self):
        """初期化後の検証"""
        if self.master_clock_frequency <= 0:
            raise InvalidValueError(
                f"Master clock frequency must be positive, got {self.master_clock_frequency}")

        if not (1 <= self.divider_bits <= 16):
            raise InvalidValueError(f"Divider bits {self.divider_bits} out of range [1, 16]")

        # VCOピッチ範囲
        if not (0 < self.vco_min < self.vco_max <= MASK_14BIT):
            raise InvalidValueError(
                f"VCO range [{self.vco_min}, {self.vco_max}] must satisfy 0 < min < max <= {MASK_14BIT}")

        for name in ('vco_pitch_high', 'vco_pitch_low'):
            value = getattr(self, name)
            if not (0 <= value <= MASK_14BIT):
                raise InvalidValueError(f"{name} {value} out of range [0, {MASK_14BIT}]")

        # SLF
        if not (0 <= self.slf_step_interval <= MASK_16BIT):
            raise InvalidValueError(
                f"SLF step interval {self.slf_step_interval} out of range [0, {MASK_16BIT}]")

        if not (self.vco_min < self.slf_upper_bound <= self.vco_max):
            raise InvalidValueError(
                f"SLF upper bound {self.slf_upper_bound} out of range ({self.vco_min}, {self.vco_max}]")

        # ワンショット (11ビット)
        if not (1 <= self.one_shot_duration <= MASK_11BIT):
            raise InvalidValueError(
                f"One-shot duration {self.one_shot_duration} out of range [1, {MASK_11BIT}]")

        # エンベロープ
        if not (1 <= self.attack_step <= MAX_ATTACK_STEP):
            raise InvalidValueError(f"Attack step {self.attack_step} out of range [1, {MAX_ATTACK_STEP}]")

        if not (1 <= self.decay_step <= MASK_14BIT):
            raise InvalidValueError(f"Decay step {self.decay_step} out of range [1, {MASK_14BIT}]")

        if self.attack_interval < 1 or self.decay_interval < 1:
            raise InvalidValueError(
                f"Envelope intervals must be >= 1, got attack={self.attack_interval}, "
                f"decay={self.decay_interval}")

        # ノイズ
        if not (0 < self.noise_tap_mask <= MASK_16BIT) or not (self.noise_tap_mask & 1):
            raise InvalidValueError(
                f"Noise tap mask 0x{self.noise_tap_mask:X} must be a 16-bit value with bit 0 set")

        if not (0 < self.noise_seed <= MASK_16BIT):
            raise InvalidValueError(f"Noise seed {self.noise_seed} out of range [1, {MASK_16BIT}]")

        if self.noise_color not in VALID_NOISE_COLORS:
            raise InvalidValueError(
                f"Invalid noise color '{self.noise_color}', must be one of {VALID_NOISE_COLORS}")

    @property
    def strobe_period(self) -> int:
        """ストローブ周期 (マスターティック数)"""
        return 1 << self.divider_bits

    @property
    def strobe_frequency(self) -> float:
        """ストローブ周波数 (Hz)"""
        return self.master_clock_frequency / self.strobe_period

    @property
    def slf_frequency(self) -> float:
        """SLF周波数を計算

        Formula:
            F_slf = F_clock / (2 * (upper - vco_min) * (interval + 1))
        """
        steps = 2 * (self.slf_upper_bound - self.vco_min)
        return self.master_clock_frequency / (steps * (self.slf_step_interval + 1))

    def vco_frequency(self, pitch: int) -> float:
        """指定ピッチでのVCO矩形波周波数を計算

        Args:
            pitch: 14ビットピッチ値

        Returns:
            周波数 (Hz)

        Formula:
            F_vco = F_clock / (2 * (pitch + 1))
        """
        if not (0 <= pitch <= MASK_14BIT):
            raise InvalidValueError(f"Pitch {pitch} out of range [0, {MASK_14BIT}]")
        return self.master_clock_frequency / (2.0 * (pitch + 1))

    @property
    def attack_time(self) -> float:
        """0から飽和までのアタック時間 (秒)"""
        steps = math.ceil(ENVELOPE_SATURATION_MASK / self.attack_step)
        return steps * self.attack_interval / self.strobe_frequency

    @property
    def decay_time(self) -> float:
        """飽和から0までのディケイ時間 (秒)"""
        steps = math.ceil(ENVELOPE_SATURATION_MASK / self.decay_step)
        return steps * self.decay_interval / self.strobe_frequency

    @property
    def one_shot_time(self) -> float:
        """ワンショットパルス長 (秒)"""
        return self.one_shot_duration / self.strobe_frequency

    def copy(self) -> 'CSGConfig':
        """設定のコピーを作成

        Returns:
            コピーされた設定オブジェクト
        """
        return replace(self)

    def __str__(self) -> str:
        """文字列表現"""
        return (f"CSGConfig("
                f"clock={self.master_clock_frequency/1000000:.3f}MHz, "
                f"strobe={self.strobe_frequency/1000:.1f}kHz, "
                f"slf={self.slf_frequency:.1f}Hz, "
                f"attack={self.attack_time*1000:.2f}ms, "
                f"decay={self.decay_time*1000:.1f}ms, "
                f"debug={self.enable_debug})")


# =============================================================================
# プリセット設定
# =============================================================================

def create_default_config() -> CSGConfig:
    """デフォルト設定を作成

    Returns:
        デフォルト設定オブジェクト (リファレンス動作)
    """
    return CSGConfig()


def create_reference_config() -> CSGConfig:
    """リファレンスハードウェア準拠設定を作成

    キャプチャされたリファレンストレースと同じ単一レート動作
    (固定アタックステップ、1ずつのディケイ) を明示的に指定します。

    Returns:
        リファレンス設定オブジェクト
    """
    return CSGConfig(
        slf_step_interval=SLF_RATE_PRESETS[0][0],
        slf_upper_bound=SLF_RATE_PRESETS[0][1],
        attack_step=ATTACK_RATE_PRESETS[0][0],
        attack_interval=ATTACK_RATE_PRESETS[0][1],
        decay_step=1,
        decay_interval=1
    )


def create_debug_config() -> CSGConfig:
    """デバッグ設定を作成

    Returns:
        デバッグ設定オブジェクト (デバッグ出力有効)
    """
    return CSGConfig(enable_debug=True)


def create_preset_config(slf_rate: int = 0, attack_rate: int = 0, decay_rate: int = 0,
                         **overrides) -> CSGConfig:
    """レートプリセット番号から設定を作成

    Args:
        slf_rate: SLFレート番号 (0-3: 173/35/16/3 Hz)
        attack_rate: アタックレート番号 (0-3: 1.95/5.85/90/270 ms)
        decay_rate: ディケイレート番号 (0-3: 21/340/213/1020 ms)
        **overrides: その他のCSGConfigフィールド

    Returns:
        設定オブジェクト

    Raises:
        InvalidValueError: プリセット番号が無効な場合
    """
    for name, index in (('slf_rate', slf_rate), ('attack_rate', attack_rate),
                        ('decay_rate', decay_rate)):
        if not (0 <= index <= 3):
            raise InvalidValueError(f"{name} preset {index} out of range [0, 3]")

    slf_interval, slf_bound = SLF_RATE_PRESETS[slf_rate]
    attack_step, attack_interval = ATTACK_RATE_PRESETS[attack_rate]
    decay_step, decay_interval = DECAY_RATE_PRESETS[decay_rate]

    params = dict(
        slf_step_interval=slf_interval,
        slf_upper_bound=slf_bound,
        attack_step=attack_step,
        attack_interval=attack_interval,
        decay_step=decay_step,
        decay_interval=decay_interval
    )
    params.update(overrides)
    return CSGConfig(**params)
