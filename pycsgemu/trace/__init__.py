"""
PyCSGEmu トレース層

制御スケジュール、ティックトレースの記録・保存・比較を提供します。
リファレンスハードウェアのキャプチャとのビット単位検証に使用します。
"""

from .schedule import (
    TraceError,
    ControlEvent,
    ControlSchedule,
    CONTROL_FIELDS,
    create_release_schedule,
)

from .recorder import (
    TickTrace,
    PROBE_SIGNALS,
    render_trace,
)

from .comparison import (
    TraceComparison,
    compare_traces,
)

__all__ = [
    "TraceError",
    "ControlEvent",
    "ControlSchedule",
    "CONTROL_FIELDS",
    "create_release_schedule",
    "TickTrace",
    "PROBE_SIGNALS",
    "render_trace",
    "TraceComparison",
    "compare_traces",
]
