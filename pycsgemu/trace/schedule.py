"""
制御スケジュールモジュール

ティック番号ごとの制御入力の変更とリセットパルスを表現します。
リファレンストレースの再生や、CLIからのシナリオ指定に使用します。
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, List, Iterator, Optional, Union
from ..core.types import CSGError, ControlInputs


class TraceError(CSGError):
    """トレース・スケジュール関連のエラー"""
    pass


CONTROL_FIELDS = tuple(f.name for f in fields(ControlInputs))


@dataclass
class ControlEvent:
    """制御イベント

    Attributes:
        tick: 適用するティック番号 (0始まり)
        changes: 書き換える制御入力フィールド
        reset_ticks: このティックからリセットを保持するティック数
    """
    tick: int
    changes: Dict[str, Any] = field(default_factory=dict)
    reset_ticks: int = 0

    def __post_init__(self):
        """初期化後の検証"""
        try:
            self.tick = int(self.tick)
            self.reset_ticks = int(self.reset_ticks)
        except (TypeError, ValueError) as e:
            raise TraceError(f"Event tick and reset_ticks must be integers: {e}") from e

        if self.tick < 0:
            raise TraceError(f"Event tick must be non-negative, got {self.tick}")

        if self.reset_ticks < 0:
            raise TraceError(f"reset_ticks must be non-negative, got {self.reset_ticks}")

        unknown = set(self.changes) - set(CONTROL_FIELDS)
        if unknown:
            raise TraceError(f"Unknown control fields {sorted(unknown)}, expected {CONTROL_FIELDS}")

        # 適用時ではなく生成時に値の型を検出する
        try:
            ControlInputs(**self.changes).masked()
        except (TypeError, ValueError) as e:
            raise TraceError(f"Invalid control values {self.changes}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式にシリアライズ"""
        return {
            'tick': self.tick,
            'changes': dict(self.changes),
            'reset_ticks': self.reset_ticks
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ControlEvent':
        """辞書からデシリアライズ"""
        if not isinstance(data, dict):
            raise TraceError(f"Control event must be an object, got {data!r}")

        try:
            return cls(
                tick=data['tick'],
                changes=dict(data.get('changes', {})),
                reset_ticks=data.get('reset_ticks', 0)
            )
        except KeyError as e:
            raise TraceError(f"Control event is missing key {e}") from e
        except (TypeError, ValueError) as e:
            raise TraceError(f"Invalid control event {data}: {e}") from e


class ControlSchedule:
    """制御スケジュール

    初期制御入力と、ティック順に並んだ制御イベントの列を保持します。
    同一ティックのイベントは追加順に適用されます。
    """

    def __init__(self, initial_controls: Optional[ControlInputs] = None,
                 events: Optional[List[ControlEvent]] = None):
        """ControlScheduleを初期化

        Args:
            initial_controls: ティック0より前に設定する制御入力
            events: 制御イベントのリスト
        """
        self.initial_controls = (initial_controls or ControlInputs()).masked()
        self._events: List[ControlEvent] = []
        for event in events or []:
            self._insert(event)

    def _insert(self, event: ControlEvent) -> None:
        # 安定ソート: 同一ティックは追加順
        index = len(self._events)
        while index > 0 and self._events[index - 1].tick > event.tick:
            index -= 1
        self._events.insert(index, event)

    def add(self, tick: int, reset_ticks: int = 0, **changes) -> 'ControlSchedule':
        """イベントを追加

        Args:
            tick: 適用ティック
            reset_ticks: リセット保持ティック数
            **changes: 書き換える制御入力フィールド

        Returns:
            self (メソッドチェーン用)
        """
        self._insert(ControlEvent(tick=tick, changes=changes, reset_ticks=reset_ticks))
        return self

    def events_at(self, tick: int) -> List[ControlEvent]:
        """指定ティックのイベントを取得"""
        return [event for event in self._events if event.tick == tick]

    def by_tick(self) -> Dict[int, List[ControlEvent]]:
        """ティック番号をキーとするイベント辞書を取得"""
        grouped: Dict[int, List[ControlEvent]] = {}
        for event in self._events:
            grouped.setdefault(event.tick, []).append(event)
        return grouped

    @property
    def last_tick(self) -> int:
        """最後のイベントのティック (イベントがなければ-1)"""
        return self._events[-1].tick if self._events else -1

    def __iter__(self) -> Iterator[ControlEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    # =========================================================================
    # シリアライズ
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式にシリアライズ"""
        return {
            'initial_controls': self.initial_controls.to_dict(),
            'events': [event.to_dict() for event in self._events]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ControlSchedule':
        """辞書からデシリアライズ

        Raises:
            TraceError: 構造や値が不正な場合
        """
        if not isinstance(data, dict):
            raise TraceError(f"Schedule must be an object, got {type(data).__name__}")

        try:
            initial = ControlInputs.from_dict(data.get('initial_controls', {}))
        except (TypeError, ValueError, AttributeError) as e:
            raise TraceError(f"Invalid initial_controls: {e}") from e

        items = data.get('events', [])
        if not isinstance(items, list):
            raise TraceError(f"Schedule events must be a list, got {type(items).__name__}")

        events = [ControlEvent.from_dict(item) for item in items]
        return cls(initial_controls=initial, events=events)

    def save(self, path: Union[str, Path]) -> None:
        """JSONファイルに保存

        Raises:
            TraceError: 書き込みに失敗した場合
        """
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise TraceError(f"Failed to save schedule to {path}: {e}") from e

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ControlSchedule':
        """JSONファイルから読み込み

        Raises:
            TraceError: 読み込み・解析に失敗した場合
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TraceError(f"Failed to load schedule from {path}: {e}") from e

        return cls.from_dict(data)

    def __repr__(self) -> str:
        return f"ControlSchedule(initial={self.initial_controls}, events={len(self._events)})"


# =============================================================================
# ファクトリ関数
# =============================================================================

def create_release_schedule(release_tick: int, **initial) -> ControlSchedule:
    """inhibitを保持してから解除するスケジュールを作成

    Args:
        release_tick: inhibitをFalseにするティック
        **initial: 初期制御入力フィールド (inhibitは常にTrueで開始)

    Returns:
        制御スケジュール
    """
    initial['inhibit'] = True
    schedule = ControlSchedule(initial_controls=ControlInputs(**initial))
    schedule.add(release_tick, inhibit=False)
    return schedule
