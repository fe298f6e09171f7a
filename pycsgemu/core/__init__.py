"""
SN76477 CSG エミュレータ - コア層

このモジュールは、CSGエミュレータのコア機能を提供します。
基本型定義、設定クラス、各サブジェネレータおよびエミュレータコアを含みます。
"""

from .types import (
    # エラークラス
    CSGError,
    InvalidValueError,

    # 制御入力
    MixerSelect,
    EnvelopeSelect,
    ControlInputs,

    # 状態クラス
    ClockDividerState,
    NoiseState,
    SlfState,
    VcoState,
    OneShotState,
    EnvelopeState,
    CSGState,

    # 抽象基底クラス
    Device,

    # 定数
    MASK_14BIT,
    MASK_11BIT,
    MASK_16BIT,
    DEFAULT_DIVIDER_BITS,
    VCO_MIN,
    VCO_MAX,
    LFSR_INITIAL_VALUE,
    NOISE_TAP_MASK,
    ONE_SHOT_DURATION,
    ENVELOPE_SATURATION_MASK,
    MAX_ENVELOPE_MAGNITUDE,
    MAX_ATTACK_STEP,
)

from .device_config import (
    # 設定クラス
    CSGConfig,

    # プリセットテーブル
    SLF_RATE_PRESETS,
    ATTACK_RATE_PRESETS,
    DECAY_RATE_PRESETS,
    VALID_NOISE_COLORS,

    # プリセット設定関数
    create_default_config,
    create_reference_config,
    create_debug_config,
    create_preset_config,
)

from .clock_divider import ClockDivider

from .noise_generator import (
    NoiseGenerator,
    analyze_noise_balance,
)

from .slf_oscillator import SlfOscillator

from .vco_oscillator import (
    VcoOscillator,
    calculate_pitch_from_frequency,
)

from .one_shot import OneShotGate

from .envelope_generator import (
    EnvelopeSelector,
    EnvelopeShaper,
)

from .mixer import Mixer

from .sound_generator import (
    # コアエミュレータクラス
    TickSignals,
    SoundGenerator,

    # ファクトリ関数
    create_sound_generator,
    create_debug_generator,
)

# パブリックAPI
__all__ = [
    # エラークラス
    "CSGError",
    "InvalidValueError",

    # 制御入力
    "MixerSelect",
    "EnvelopeSelect",
    "ControlInputs",

    # 状態クラス
    "ClockDividerState",
    "NoiseState",
    "SlfState",
    "VcoState",
    "OneShotState",
    "EnvelopeState",
    "CSGState",

    # 設定クラス
    "CSGConfig",

    # 抽象基底クラス
    "Device",

    # ジェネレータクラス
    "ClockDivider",
    "NoiseGenerator",
    "SlfOscillator",
    "VcoOscillator",
    "OneShotGate",
    "EnvelopeSelector",
    "EnvelopeShaper",
    "Mixer",

    # コアエミュレータクラス
    "TickSignals",
    "SoundGenerator",

    # 定数
    "MASK_14BIT",
    "MASK_11BIT",
    "MASK_16BIT",
    "DEFAULT_DIVIDER_BITS",
    "VCO_MIN",
    "VCO_MAX",
    "LFSR_INITIAL_VALUE",
    "NOISE_TAP_MASK",
    "ONE_SHOT_DURATION",
    "ENVELOPE_SATURATION_MASK",
    "MAX_ENVELOPE_MAGNITUDE",
    "MAX_ATTACK_STEP",

    # プリセット
    "SLF_RATE_PRESETS",
    "ATTACK_RATE_PRESETS",
    "DECAY_RATE_PRESETS",
    "VALID_NOISE_COLORS",
    "create_default_config",
    "create_reference_config",
    "create_debug_config",
    "create_preset_config",

    # ファクトリ・ユーティリティ関数
    "create_sound_generator",
    "create_debug_generator",
    "analyze_noise_balance",
    "calculate_pitch_from_frequency",
]
