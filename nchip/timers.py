#!/usr/bin/env python3

"""
Delay and Sound Timers

Both timers count down at 60Hz, but the CPU never decrements them.  Instead,
arming a timer records the value and the instant it was armed, and the
current value is worked out from the elapsed wall-clock time whenever it is
read.  This means the timers keep running even while no instructions are
executing.

The clock can be swapped out (e.g. for a fake one in tests).  It must return
seconds as a float, like 'perf_counter'.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter
from .constants import TIMER_FREQ


def remaining_ticks(armed_value, armed_time, now):
    # Whole milliseconds first, then whole ticks, so partial ticks never count
    elapsed_ms = max(0, int((now - armed_time) * 1000))
    elapsed_ticks = (elapsed_ms * TIMER_FREQ) // 1000

    if elapsed_ticks >= armed_value:
        return 0

    return armed_value - elapsed_ticks


class Timer:
    def __init__(self, clock=perf_counter):
        self.clock = clock
        self.armed_value = 0
        self.armed_time = None

    def arm(self, value):
        self.armed_value = value
        self.armed_time = self.clock()

    def is_armed(self):
        return self.armed_time is not None

    def read(self):
        if self.armed_time is None:
            return 0  # Never started

        return remaining_ticks(self.armed_value, self.armed_time, self.clock())
