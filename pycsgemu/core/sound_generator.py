"""
SN76477 CSG エミュレータ - コアエミュレータ

このモジュールは、CSGの全サブジェネレータを1つのマスターティックに同期させ、
1ティックごとに14ビット振幅サンプルを生成するSoundGeneratorを実装します。
"""

from dataclasses import replace
from typing import Dict, Any, NamedTuple, Optional
import numpy as np
from .types import (
    Device,
    ControlInputs,
    CSGState,
    InvalidValueError,
)
from .device_config import CSGConfig
from .clock_divider import ClockDivider
from .noise_generator import NoiseGenerator
from .slf_oscillator import SlfOscillator
from .vco_oscillator import VcoOscillator
from .one_shot import OneShotGate
from .envelope_generator import EnvelopeSelector, EnvelopeShaper
from .mixer import Mixer


class TickSignals(NamedTuple):
    """ティック境界で読み出される組み合わせ信号"""
    strobe: bool
    pitch: int
    vco: bool
    vco2: bool
    noise: bool
    slf: bool
    one_shot: bool
    envelope_bit: bool
    mixer_output: bool
    signal_on: bool
    output: int


class SoundGenerator(Device):
    """CSG コアエミュレータ

    1マスターティックで全サブジェネレータを正確に1回進めます。
    同期回路と同様に、ティック内の更新はすべて前ティックの状態
    (スナップショット) から計算し、全コンポーネントの新状態を
    計算し終えてから一括で確定します (compute-then-commit)。
    あるコンポーネントが同じティック内で他のコンポーネントの
    更新後の値を参照することはありません。

    1ティックの処理:
        1. 旧状態から組み合わせ信号を評価 (ストローブ、ピッチ、エンベロープ選択)
        2. 分周器、VCO、ノイズ、SLF、ワンショット、エンベロープの次状態を計算
        3. 全次状態を確定
        4. 確定後の状態と今回の制御入力から出力サンプルを計算
           signal_on = NOT inhibit AND mixer_output
           output = envelope magnitude if signal_on else 0

    Attributes:
        _config: エミュレータ設定
        _controls: 現在の制御入力 (マスク済み)
        _divider: クロック分周器
        _noise_generator: ノイズジェネレータ
        _slf: SLF
        _vco: VCO
        _one_shot: ワンショット
        _envelope_shaper: エンベロープシェイパ
        _signals: 直前ティック確定後の組み合わせ信号
    """

    def __init__(self, config: CSGConfig):
        """SoundGeneratorを初期化

        Args:
            config: エミュレータ設定
        """
        self._config = config
        self._controls = ControlInputs().masked()

        # ジェネレータインスタンス作成
        self._divider = ClockDivider(config.divider_bits)
        self._noise_generator = NoiseGenerator(config.noise_seed, config.noise_tap_mask)
        self._slf = SlfOscillator(config.slf_step_interval, config.slf_upper_bound, config.vco_min)
        self._vco = VcoOscillator()
        self._one_shot = OneShotGate(config.one_shot_duration)
        self._envelope_shaper = EnvelopeShaper(
            attack_step=config.attack_step,
            decay_step=config.decay_step,
            attack_interval=config.attack_interval,
            decay_interval=config.decay_interval
        )

        self._master_tick_counter = 0
        self._signals = self._evaluate_signals(self._controls)

        # デバッグ情報
        self._debug_info = {
            'total_ticks': 0,
            'strobes': 0,
            'resets': 0,
            'control_writes': 0,
            'last_output': 0
        }

        if config.enable_debug:
            print(f"[DEBUG] {self.name} initialized: {config}")
            if config.noise_color != 'white':
                print(f"[DEBUG] noise_color='{config.noise_color}' is not applied by the core (white noise only)")

    @property
    def name(self) -> str:
        """デバイス名を取得"""
        return "SN76477 CSG"

    # =========================================================================
    # リセット
    # =========================================================================

    def _apply_reset(self) -> None:
        """全コンポーネントを初期状態に確定"""
        self._divider.reset()
        self._noise_generator.reset()
        self._slf.reset()
        self._vco.reset()
        self._one_shot.reset()
        self._envelope_shaper.reset()
        self._master_tick_counter = 0
        self._signals = self._evaluate_signals(self._controls)

    def reset(self) -> None:
        """エミュレータをリセット (ティックを消費しない)"""
        self._apply_reset()

        self._debug_info = {
            'total_ticks': 0,
            'strobes': 0,
            'resets': 0,
            'control_writes': 0,
            'last_output': 0
        }

        if self._config.enable_debug:
            print(f"[DEBUG] {self.name} reset completed")

    # =========================================================================
    # 制御入力
    # =========================================================================

    def set_controls(self, controls: ControlInputs) -> None:
        """制御入力を設定 (ビット幅にマスク)

        Args:
            controls: 新しい制御入力
        """
        self._controls = controls.masked()
        self._debug_info['control_writes'] += 1

    def write_control(self, **fields) -> None:
        """制御入力の一部フィールドを書き換え

        Args:
            **fields: ControlInputsのフィールド名と値

        Raises:
            InvalidValueError: 未知のフィールド名の場合
        """
        try:
            controls = replace(self._controls, **fields)
        except TypeError as e:
            raise InvalidValueError(f"Unknown control field in {sorted(fields)}: {e}") from e

        self.set_controls(controls)

        if self._config.enable_debug:
            print(f"[DEBUG] Control write {fields} -> {self._controls.to_dict()}")

    def get_controls(self) -> ControlInputs:
        """現在の制御入力を取得"""
        return self._controls

    # =========================================================================
    # ティック実行
    # =========================================================================

    def _select_pitch(self, controls: ControlInputs, sawtooth: int) -> int:
        """VCOに与えるピッチを選択

        vco_selectがTrueならSLFのこぎり波 (周波数変調)、
        Falseなら2つの固定ピッチ定数のいずれか。
        """
        if controls.vco_select:
            return sawtooth
        if controls.vco_pitch_preset:
            return self._config.vco_pitch_high
        return self._config.vco_pitch_low

    def _evaluate_signals(self, controls: ControlInputs) -> TickSignals:
        """現在確定している状態から組み合わせ信号を評価"""
        vco_state = self._vco.state
        vco = VcoOscillator.vco_of(vco_state)
        vco2 = VcoOscillator.vco2_of(vco_state)
        noise = NoiseGenerator.output_of(self._noise_generator.state)
        slf = SlfOscillator.square_of(self._slf.state)
        one_shot = OneShotGate.output_of(self._one_shot.state)

        envelope_bit = EnvelopeSelector.select(controls.envelope_select, vco, one_shot, vco2)
        mixer_output = Mixer.mix(controls.mixer_select, vco, noise, slf, envelope_bit)
        signal_on = (not controls.inhibit) and mixer_output
        output = self._envelope_shaper.state.magnitude if signal_on else 0

        return TickSignals(
            strobe=self._divider.strobe,
            pitch=self._select_pitch(controls, self._slf.state.sawtooth),
            vco=vco,
            vco2=vco2,
            noise=noise,
            slf=slf,
            one_shot=one_shot,
            envelope_bit=envelope_bit,
            mixer_output=mixer_output,
            signal_on=signal_on,
            output=output
        )

    def step(self, controls: Optional[ControlInputs] = None, reset: bool = False) -> int:
        """1マスターティックを実行

        Args:
            controls: このティックから適用する制御入力 (Noneなら現在値を維持)
            reset: 同期リセット (Trueの間は全状態を初期値に保持)

        Returns:
            このティックの14ビット出力サンプル
        """
        if controls is not None:
            self.set_controls(controls)

        self._debug_info['total_ticks'] += 1

        if reset:
            self._apply_reset()
            self._debug_info['resets'] += 1
            self._debug_info['last_output'] = 0
            return 0

        controls = self._controls
        signals = self._evaluate_signals(controls)
        strobe = signals.strobe

        # 旧状態スナップショットから全次状態を計算
        divider_next = self._divider.next_state(self._divider.state)
        vco_next = self._vco.next_state(self._vco.state, signals.pitch)
        noise_next = self._noise_generator.next_state(self._noise_generator.state, strobe)
        slf_next = self._slf.next_state(self._slf.state)
        one_shot_next = self._one_shot.next_state(self._one_shot.state, controls.inhibit, strobe)
        envelope_next = self._envelope_shaper.next_state(
            self._envelope_shaper.state, signals.envelope_bit, strobe)

        # 一括確定
        self._divider.commit(divider_next)
        self._vco.commit(vco_next)
        self._noise_generator.commit(noise_next)
        self._slf.commit(slf_next)
        self._one_shot.commit(one_shot_next)
        self._envelope_shaper.commit(envelope_next)

        self._master_tick_counter += 1

        # 確定後の信号 (ピッチは今回VCOに与えた値を保持)
        self._signals = self._evaluate_signals(controls)._replace(pitch=signals.pitch)

        if strobe:
            self._debug_info['strobes'] += 1
        self._debug_info['last_output'] = self._signals.output

        return self._signals.output

    def tick(self, master_cycles: int) -> int:
        """Tick駆動実行

        現在の制御入力のまま指定数のマスターティックを実行します。

        Args:
            master_cycles: 実行するマスターティック数

        Returns:
            実際に消費されたティック数

        Raises:
            InvalidValueError: ティック数が負の場合
        """
        if master_cycles < 0:
            raise InvalidValueError(f"master_cycles must be non-negative, got {master_cycles}")

        for _ in range(master_cycles):
            self.step()

        return master_cycles

    def run(self, num_ticks: int, controls: Optional[ControlInputs] = None) -> np.ndarray:
        """指定数のティックを実行し出力サンプル列を返す

        Args:
            num_ticks: 実行するティック数
            controls: 最初に適用する制御入力

        Returns:
            出力サンプル (uint16, shape=(num_ticks,))

        Raises:
            InvalidValueError: ティック数が負の場合
        """
        if num_ticks < 0:
            raise InvalidValueError(f"num_ticks must be non-negative, got {num_ticks}")

        if controls is not None:
            self.set_controls(controls)

        samples = np.zeros(num_ticks, dtype=np.uint16)
        for i in range(num_ticks):
            samples[i] = self.step()
        return samples

    # =========================================================================
    # 出力・観測
    # =========================================================================

    def get_output(self) -> int:
        """直前ティックの14ビット出力サンプルを取得"""
        return self._signals.output

    def get_signals(self) -> TickSignals:
        """直前ティック確定後の組み合わせ信号を取得"""
        return self._signals

    @property
    def clock_divider(self) -> ClockDivider:
        return self._divider

    @property
    def noise_generator(self) -> NoiseGenerator:
        return self._noise_generator

    @property
    def slf(self) -> SlfOscillator:
        return self._slf

    @property
    def vco(self) -> VcoOscillator:
        return self._vco

    @property
    def one_shot(self) -> OneShotGate:
        return self._one_shot

    @property
    def envelope_shaper(self) -> EnvelopeShaper:
        return self._envelope_shaper

    @property
    def master_tick_counter(self) -> int:
        """リセット後に実行したティック数"""
        return self._master_tick_counter

    # =========================================================================
    # 状態保存・復元
    # =========================================================================

    def get_csg_state(self) -> CSGState:
        """現在の内部状態をCSGStateとして取得"""
        return CSGState(
            divider=self._divider.state,
            noise=self._noise_generator.state,
            slf=self._slf.state,
            vco=self._vco.state,
            one_shot=self._one_shot.state,
            envelope=self._envelope_shaper.state,
            master_tick_counter=self._master_tick_counter,
            pitch=self._signals.pitch,
            envelope_bit=self._signals.envelope_bit,
            mixer_output=self._signals.mixer_output,
            output=self._signals.output
        ).copy()

    def get_state(self) -> Dict[str, Any]:
        """現在の状態を取得

        Returns:
            状態辞書 (制御入力とデバッグ情報を含む)
        """
        state_dict = self.get_csg_state().to_dict()
        state_dict['controls'] = self._controls.to_dict()
        state_dict['debug_info'] = self._debug_info.copy()
        return state_dict

    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を復元

        Args:
            state: 状態辞書

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        csg_state = CSGState.from_dict(state)
        csg_state.validate()

        if 'controls' in state:
            self._controls = ControlInputs.from_dict(state['controls'])

        self._divider.commit(csg_state.divider)
        self._noise_generator.commit(csg_state.noise)
        self._slf.commit(csg_state.slf)
        self._vco.commit(csg_state.vco)
        self._one_shot.commit(csg_state.one_shot)
        self._envelope_shaper.commit(csg_state.envelope)
        self._master_tick_counter = csg_state.master_tick_counter
        self._signals = self._evaluate_signals(self._controls)._replace(pitch=csg_state.pitch)

        if 'debug_info' in state:
            self._debug_info.update(state['debug_info'])

        if self._config.enable_debug:
            print(f"[DEBUG] State restored at tick {self._master_tick_counter}")

    # =========================================================================
    # デバッグ
    # =========================================================================

    def get_debug_info(self) -> Dict[str, Any]:
        """デバッグ情報を取得

        Returns:
            デバッグ情報辞書
        """
        signals = self._signals
        return {
            'config': {
                'master_clock_frequency': self._config.master_clock_frequency,
                'strobe_frequency': self._config.strobe_frequency,
                'slf_frequency': self._config.slf_frequency,
                'attack_time': self._config.attack_time,
                'decay_time': self._config.decay_time,
                'enable_debug': self._config.enable_debug
            },
            'statistics': self._debug_info.copy(),
            'controls': self._controls.to_dict(),
            'mixer': Mixer.analyze_mixer_select(self._controls.mixer_select),
            'envelope_source': EnvelopeSelector.describe(self._controls.envelope_select),
            'current_state': {
                'master_tick_counter': self._master_tick_counter,
                'pitch': signals.pitch,
                'vco_frequency': self._config.vco_frequency(signals.pitch),
                'sawtooth': self._slf.get_sawtooth(),
                'lfsr': self._noise_generator.get_lfsr_state(),
                'one_shot_counter': self._one_shot.state.counter,
                'envelope_magnitude': self._envelope_shaper.get_magnitude(),
                'signals': signals._asdict()
            }
        }

    def get_config(self) -> CSGConfig:
        """エミュレータ設定を取得"""
        return self._config

    def __str__(self) -> str:
        """文字列表現"""
        return (f"SoundGenerator(clock={self._config.master_clock_frequency/1000000:.3f}MHz, "
                f"ticks={self._master_tick_counter})")

    def __repr__(self) -> str:
        """詳細文字列表現"""
        return (f"SoundGenerator(config={self._config}, "
                f"controls={self._controls}, "
                f"signals={self._signals})")


# =============================================================================
# ファクトリ関数
# =============================================================================

def create_sound_generator(config: CSGConfig = None) -> SoundGenerator:
    """SoundGeneratorを作成

    Args:
        config: エミュレータ設定 (Noneの場合はデフォルト作成)

    Returns:
        SoundGeneratorインスタンス
    """
    if config is None:
        from .device_config import create_default_config
        config = create_default_config()

    return SoundGenerator(config)


def create_debug_generator() -> SoundGenerator:
    """デバッグ用SoundGeneratorを作成

    Returns:
        デバッグ出力有効のSoundGeneratorインスタンス
    """
    from .device_config import create_debug_config
    return SoundGenerator(create_debug_config())
