"""
PyCSGEmu ユーティリティ層

このモジュールは、CSGエミュレータで使用される
ユーティリティクラスと関数を提供します。
"""

from .lfsr import (
    # LFSRクラス
    LFSR,

    # ユーティリティ関数
    lfsr_step,
    measure_lfsr_period,
    generate_noise_sequence,
)

# パブリックAPI
__all__ = [
    "LFSR",
    "lfsr_step",
    "measure_lfsr_period",
    "generate_noise_sequence",
]
