"""
クロック分周器のテスト
"""

import pytest

from pycsgemu.core.clock_divider import ClockDivider
from pycsgemu.core.types import InvalidValueError


def run_divider(divider, ticks):
    strobes = []
    for t in range(1, ticks + 1):
        divider.commit(divider.next_state(divider.state))
        if divider.strobe:
            strobes.append(t)
    return strobes


def test_strobe_every_512_ticks():
    divider = ClockDivider()
    assert divider.period == 512
    assert run_divider(divider, 2048) == [512, 1024, 1536, 2048]


def test_strobe_is_single_tick_wide():
    divider = ClockDivider(bits=3)
    strobes = run_divider(divider, 64)
    assert strobes == list(range(8, 65, 8))


def test_counter_wraps_after_carry():
    divider = ClockDivider(bits=2)
    counters = []
    for _ in range(9):
        divider.commit(divider.next_state(divider.state))
        counters.append(divider.state.counter)
    assert counters == [1, 2, 3, 4, 1, 2, 3, 4, 1]


def test_reset():
    divider = ClockDivider()
    run_divider(divider, 100)
    divider.reset()
    assert divider.state.counter == 0
    assert divider.strobe is False


def test_invalid_bits():
    with pytest.raises(InvalidValueError):
        ClockDivider(bits=0)
