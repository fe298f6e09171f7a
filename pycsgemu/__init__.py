"""
PyCSGEmu - SN76477 Complex Sound Generator エミュレータ

SN76477系コンプレックスサウンドジェネレータ (CSG) のティック精度エミュレータ。
マスタークロック1ティックごとに14ビット振幅サンプルを生成し、
リファレンスハードウェアのキャプチャとビット単位で一致させることを目的とします。

主な機能:
- クロック分周器による48kHzストローブ
- 16ビットLFSRノイズジェネレータ
- SLF (低周波三角波/方形波) とVCO (周波数変調対応)
- ワンショットゲートとアタック/ディケイエンベロープ
- 8モードミキサー
- 制御スケジュールによるトレース記録・比較
- 波形表示・性能計測

使用例:
    >>> from pycsgemu import create_sound_generator, ControlInputs
    >>> csg = create_sound_generator()
    >>> csg.set_controls(ControlInputs(inhibit=False))
    >>> samples = csg.run(1024)
"""

# バージョン情報
__version__ = "1.0.0"
__author__ = "PyCSGEmu Development Team"
__license__ = "MIT"
__description__ = "SN76477 CSG Emulator - Tick-accurate emulation of the SN76477 complex sound generator"

# バージョン情報辞書
VERSION_INFO = {
    'version': __version__,
    'author': __author__,
    'license': __license__,
    'description': __description__
}

# コア機能のインポート
from .core import (
    # エラークラス
    CSGError,
    InvalidValueError,

    # 制御入力・状態・設定
    MixerSelect,
    EnvelopeSelect,
    ControlInputs,
    CSGState,
    CSGConfig,

    # 抽象基底クラス
    Device,

    # ジェネレータクラス
    ClockDivider,
    NoiseGenerator,
    SlfOscillator,
    VcoOscillator,
    OneShotGate,
    EnvelopeSelector,
    EnvelopeShaper,
    Mixer,

    # コアエミュレータクラス
    TickSignals,
    SoundGenerator,

    # プリセット設定関数
    create_default_config,
    create_reference_config,
    create_debug_config,
    create_preset_config,

    # ファクトリ関数
    create_sound_generator,
    create_debug_generator,
)

# ユーティリティ
from .utils import LFSR

# トレース
from .trace import (
    TraceError,
    ControlSchedule,
    TickTrace,
    TraceComparison,
    render_trace,
    compare_traces,
)

# パブリックAPI定義
__all__ = [
    # バージョン情報
    "__version__",
    "__author__",
    "__license__",
    "__description__",

    # エラークラス
    "CSGError",
    "InvalidValueError",
    "TraceError",

    # 制御入力・状態・設定
    "MixerSelect",
    "EnvelopeSelect",
    "ControlInputs",
    "CSGState",
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

    # ユーティリティクラス
    "LFSR",

    # トレース
    "ControlSchedule",
    "TickTrace",
    "TraceComparison",
    "render_trace",
    "compare_traces",

    # プリセット設定関数
    "create_default_config",
    "create_reference_config",
    "create_debug_config",
    "create_preset_config",

    # ファクトリ関数
    "create_sound_generator",
    "create_debug_generator",
]


def get_version_info() -> dict:
    """バージョン情報を取得

    Returns:
        バージョン情報辞書
    """
    return dict(VERSION_INFO)


def create_emulator(config: CSGConfig = None) -> SoundGenerator:
    """エミュレータインスタンスを作成

    Args:
        config: エミュレータ設定 (Noneの場合はデフォルト設定)

    Returns:
        SoundGeneratorインスタンス
    """
    return create_sound_generator(config)


# ライブラリ初期化時のメッセージ (デバッグモードでのみ表示)
import os
if os.environ.get('PYCSGEMU_DEBUG'):
    print(f"PyCSGEmu v{__version__} - SN76477 CSG Emulator")
    print(f"Author: {__author__}")
    print(f"License: {__license__}")
