"""
SN76477 CSG エミュレータ - 基本型定義とエラークラス

このモジュールは、コンプレックスサウンドジェネレータ (CSG) エミュレータの
基本的な型定義、状態データクラス、制御入力、およびエラークラスを提供します。
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Any
from abc import ABC, abstractmethod


# =============================================================================
# エラークラス定義
# =============================================================================

class CSGError(Exception):
    """CSGエミュレータ基本例外"""
    pass


class InvalidValueError(CSGError):
    """無効な値エラー

    エンジン設定や状態復元に無効な値を指定した時に発生
    """
    pass


# =============================================================================
# 定数定義
# =============================================================================

MASK_14BIT = 0x3FFF
MASK_11BIT = 0x7FF
MASK_16BIT = 0xFFFF

# クロック分周器 (9ビット + キャリー)
DEFAULT_DIVIDER_BITS = 9

# VCOピッチ範囲 (SLFの下限と共有)
VCO_MIN = 1024
VCO_MAX = MASK_14BIT

# ノイズLFSR
LFSR_INITIAL_VALUE = 0xFFFF
NOISE_TAP_MASK = 0x6801  # x^16 + x^14 + x^13 + x^11 + 1

# ワンショット (≈26ms @ 48kHz)
ONE_SHOT_DURATION = 1248

# エンベロープ飽和判定 (上位3ビット)
ENVELOPE_SATURATION_MASK = 0x3800
MAX_ENVELOPE_MAGNITUDE = MASK_14BIT
MAX_ATTACK_STEP = 0x800


class MixerSelect(IntEnum):
    """ミキサー選択コード (3ビット)"""
    VCO = 0b000
    NOISE = 0b001
    SLF_NOISE = 0b010
    SLF_VCO = 0b011
    SLF = 0b100
    VCO_NOISE = 0b101
    SLF_NOISE_VCO = 0b110
    ENVELOPE = 0b111


class EnvelopeSelect(IntEnum):
    """エンベロープ選択コード (2ビット)"""
    VCO = 0b00
    MIXER_ONLY = 0b01
    ONE_SHOT = 0b10
    VCO_ALTERNATING = 0b11


# =============================================================================
# 制御入力
# =============================================================================

@dataclass
class ControlInputs:
    """ティックごとの制御入力

    外部レジスタインタフェースから供給される設定値。
    ハードウェアと同様に範囲外の値でも例外は発生させず、
    masked() でビット幅にマスクしてから使用します。

    Attributes:
        mixer_select: ミキサー選択 (3ビット)
        vco_select: True=SLF駆動ピッチ, False=固定ピッチ
        vco_pitch_preset: 固定ピッチ選択 (True=高音, False=低音)
        envelope_select: エンベロープ選択 (2ビット)
        inhibit: ミュート/アタックトリガ
    """
    mixer_select: int = MixerSelect.VCO
    vco_select: bool = False
    vco_pitch_preset: bool = False
    envelope_select: int = EnvelopeSelect.MIXER_ONLY
    inhibit: bool = True

    def masked(self) -> 'ControlInputs':
        """ビット幅にマスクした制御入力を返す"""
        return ControlInputs(
            mixer_select=MixerSelect(int(self.mixer_select) & 0x7),
            vco_select=bool(self.vco_select),
            vco_pitch_preset=bool(self.vco_pitch_preset),
            envelope_select=EnvelopeSelect(int(self.envelope_select) & 0x3),
            inhibit=bool(self.inhibit)
        )

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式にシリアライズ"""
        return {
            'mixer_select': int(self.mixer_select),
            'vco_select': bool(self.vco_select),
            'vco_pitch_preset': bool(self.vco_pitch_preset),
            'envelope_select': int(self.envelope_select),
            'inhibit': bool(self.inhibit)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ControlInputs':
        """辞書からデシリアライズ（未知のキーは無視）"""
        known = {k: data[k] for k in ('mixer_select', 'vco_select', 'vco_pitch_preset',
                                      'envelope_select', 'inhibit') if k in data}
        return cls(**known).masked()


# =============================================================================
# コンポーネント状態データクラス
# =============================================================================

@dataclass
class ClockDividerState:
    """クロック分周器状態 (キャリービットを含むカウンタ)"""
    counter: int = 0


@dataclass
class NoiseState:
    """ノイズジェネレータ状態 (16ビットLFSR)"""
    lfsr: int = LFSR_INITIAL_VALUE


@dataclass
class SlfState:
    """SLF状態

    Attributes:
        cycle_counter: ステップ間隔ダウンカウンタ
        sawtooth: 14ビットのこぎり波振幅
        direction_up: 増加方向フラグ (矩形波出力)
    """
    cycle_counter: int = 0
    sawtooth: int = 0
    direction_up: bool = True


@dataclass
class VcoState:
    """VCO状態

    Attributes:
        counter: 14ビットダウンカウンタ
        phase: 2ビット位相カウンタ
    """
    counter: int = 0
    phase: int = 0


@dataclass
class OneShotState:
    """ワンショット状態

    Attributes:
        delayed_inhibit: 前ティックのinhibit値
        counter: 11ビットダウンカウンタ
        output: レジスタ化された出力 (1ティック遅延)
    """
    delayed_inhibit: bool = False
    counter: int = 0
    output: bool = False


@dataclass
class EnvelopeState:
    """エンベロープシェイパ状態

    Attributes:
        magnitude: 14ビット振幅
        prescaler: ストローブ分周カウンタ (間隔1では常に0)
    """
    magnitude: int = 0
    prescaler: int = 0


# =============================================================================
# 全体状態データクラス
# =============================================================================

@dataclass
class CSGState:
    """CSG内部状態

    チップ全体の内部状態を表現するデータクラス。
    エミュレータの状態保存・復元、デバッグ、テストに使用される。

    Attributes:
        divider: クロック分周器状態
        noise: ノイズジェネレータ状態
        slf: SLF状態
        vco: VCO状態
        one_shot: ワンショット状態
        envelope: エンベロープシェイパ状態
        master_tick_counter: マスターティックカウンタ
        pitch: 直前ティックでVCOに与えたピッチ
        envelope_bit: 直前ティックのエンベロープ選択出力
        mixer_output: 直前ティックのミキサー出力
        output: 直前ティックの出力サンプル (14ビット)
    """
    divider: ClockDividerState = field(default_factory=ClockDividerState)
    noise: NoiseState = field(default_factory=NoiseState)
    slf: SlfState = field(default_factory=SlfState)
    vco: VcoState = field(default_factory=VcoState)
    one_shot: OneShotState = field(default_factory=OneShotState)
    envelope: EnvelopeState = field(default_factory=EnvelopeState)

    master_tick_counter: int = 0
    pitch: int = 0
    envelope_bit: bool = False
    mixer_output: bool = False
    output: int = 0

    def validate(self) -> None:
        """状態値の範囲を検証

        Raises:
            InvalidValueError: 範囲外の値を含む場合
        """
        if self.divider.counter < 0:
            raise InvalidValueError(f"Divider counter {self.divider.counter} must be non-negative")

        if not (0 < self.noise.lfsr <= MASK_16BIT):
            raise InvalidValueError(f"LFSR value {self.noise.lfsr} out of range [1, {MASK_16BIT}]")

        if not (0 <= self.slf.sawtooth <= MASK_14BIT):
            raise InvalidValueError(f"SLF sawtooth {self.slf.sawtooth} out of range [0, {MASK_14BIT}]")

        if self.slf.cycle_counter < 0:
            raise InvalidValueError(f"SLF cycle counter {self.slf.cycle_counter} must be non-negative")

        if not (0 <= self.vco.counter <= MASK_14BIT):
            raise InvalidValueError(f"VCO counter {self.vco.counter} out of range [0, {MASK_14BIT}]")

        if not (0 <= self.vco.phase <= 3):
            raise InvalidValueError(f"VCO phase {self.vco.phase} out of range [0, 3]")

        if not (0 <= self.one_shot.counter <= MASK_11BIT):
            raise InvalidValueError(f"One-shot counter {self.one_shot.counter} out of range [0, {MASK_11BIT}]")

        if not (0 <= self.envelope.magnitude <= MAX_ENVELOPE_MAGNITUDE):
            raise InvalidValueError(
                f"Envelope magnitude {self.envelope.magnitude} out of range [0, {MAX_ENVELOPE_MAGNITUDE}]")

        if self.envelope.prescaler < 0:
            raise InvalidValueError(f"Envelope prescaler {self.envelope.prescaler} must be non-negative")

    def copy(self) -> 'CSGState':
        """状態の深いコピーを作成"""
        return CSGState.from_dict(self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式にシリアライズ"""
        return {
            'divider': {'counter': self.divider.counter},
            'noise': {'lfsr': self.noise.lfsr},
            'slf': {
                'cycle_counter': self.slf.cycle_counter,
                'sawtooth': self.slf.sawtooth,
                'direction_up': self.slf.direction_up
            },
            'vco': {'counter': self.vco.counter, 'phase': self.vco.phase},
            'one_shot': {
                'delayed_inhibit': self.one_shot.delayed_inhibit,
                'counter': self.one_shot.counter,
                'output': self.one_shot.output
            },
            'envelope': {
                'magnitude': self.envelope.magnitude,
                'prescaler': self.envelope.prescaler
            },
            'master_tick_counter': self.master_tick_counter,
            'pitch': self.pitch,
            'envelope_bit': self.envelope_bit,
            'mixer_output': self.mixer_output,
            'output': self.output
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CSGState':
        """辞書からデシリアライズ

        Raises:
            InvalidValueError: 必須キーが欠けている場合
        """
        try:
            return cls(
                divider=ClockDividerState(**data['divider']),
                noise=NoiseState(**data['noise']),
                slf=SlfState(**data['slf']),
                vco=VcoState(**data['vco']),
                one_shot=OneShotState(**data['one_shot']),
                envelope=EnvelopeState(**data['envelope']),
                master_tick_counter=data.get('master_tick_counter', 0),
                pitch=data.get('pitch', 0),
                envelope_bit=data.get('envelope_bit', False),
                mixer_output=data.get('mixer_output', False),
                output=data.get('output', 0)
            )
        except (KeyError, TypeError) as e:
            raise InvalidValueError(f"Malformed state dictionary: {e}") from e


# =============================================================================
# 抽象基底クラス
# =============================================================================

class Device(ABC):
    """デバイス抽象基底クラス"""

    @property
    @abstractmethod
    def name(self) -> str:
        """デバイス名"""
        pass

    @abstractmethod
    def reset(self) -> None:
        """デバイスリセット"""
        pass

    @abstractmethod
    def tick(self, master_cycles: int) -> int:
        """Tick駆動実行"""
        pass
