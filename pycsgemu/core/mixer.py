"""
SN76477 CSG エミュレータ - ミキサー

このモジュールは、3ビットのミキサー選択コードに従って
VCO/ノイズ/SLF/エンベロープ信号から可聴波形を選ぶ
組み合わせ回路 (セレクタ/ANDネットワーク) を実装します。
"""

from typing import Dict
from .types import MixerSelect


class Mixer:
    """CSGミキサー (内部状態なし)

    エンコーディング:
        000 = VCO
        001 = ノイズ
        010 = SLF AND ノイズ
        011 = SLF AND VCO
        100 = SLF
        101 = VCO AND ノイズ
        110 = SLF AND ノイズ AND VCO
        111 = エンベロープ選択ビット (テープ音声等の外部信号のパススルー)
    """

    MIXER_MODES: Dict[MixerSelect, str] = {
        MixerSelect.VCO: "VCO",
        MixerSelect.NOISE: "Noise",
        MixerSelect.SLF_NOISE: "SLF & Noise",
        MixerSelect.SLF_VCO: "SLF & VCO",
        MixerSelect.SLF: "SLF",
        MixerSelect.VCO_NOISE: "VCO & Noise",
        MixerSelect.SLF_NOISE_VCO: "SLF & Noise & VCO",
        MixerSelect.ENVELOPE: "Envelope select",
    }

    @staticmethod
    def mix(mixer_select: int, vco: bool, noise: bool, slf: bool, envelope: bool) -> bool:
        """ミキサー出力を計算

        Args:
            mixer_select: 3ビット選択コード (上位ビットはマスク)
            vco: VCO矩形波出力
            noise: ノイズ出力
            slf: SLF矩形波出力
            envelope: エンベロープ選択出力

        Returns:
            選択された波形ビット
        """
        code = MixerSelect(int(mixer_select) & 0x7)
        if code == MixerSelect.VCO:
            return vco
        if code == MixerSelect.NOISE:
            return noise
        if code == MixerSelect.SLF_NOISE:
            return slf and noise
        if code == MixerSelect.SLF_VCO:
            return slf and vco
        if code == MixerSelect.SLF:
            return slf
        if code == MixerSelect.VCO_NOISE:
            return vco and noise
        if code == MixerSelect.SLF_NOISE_VCO:
            return slf and noise and vco
        return envelope

    @classmethod
    def analyze_mixer_select(cls, mixer_select: int) -> dict:
        """ミキサー選択コードを解析

        Args:
            mixer_select: ミキサー選択コード

        Returns:
            解析結果辞書
        """
        code = MixerSelect(int(mixer_select) & 0x7)
        return {
            'code': int(code),
            'binary': f"0b{int(code):03b}",
            'name': code.name,
            'description': cls.MIXER_MODES[code],
            'uses_vco': code in (MixerSelect.VCO, MixerSelect.SLF_VCO, MixerSelect.VCO_NOISE,
                                 MixerSelect.SLF_NOISE_VCO),
            'uses_noise': code in (MixerSelect.NOISE, MixerSelect.SLF_NOISE, MixerSelect.VCO_NOISE,
                                   MixerSelect.SLF_NOISE_VCO),
            'uses_slf': code in (MixerSelect.SLF_NOISE, MixerSelect.SLF_VCO, MixerSelect.SLF,
                                 MixerSelect.SLF_NOISE_VCO),
        }

    def __repr__(self) -> str:
        return "Mixer()"
