#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nchip.timers import Timer, remaining_ticks


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


class TestRemainingTicks(unittest.TestCase):
    def test_remaining_ticks_no_time(self):
        self.assertEqual(10, remaining_ticks(10, 5.0, 5.0))

    def test_remaining_ticks_partial_tick(self):
        # 15ms is under one 60Hz tick
        self.assertEqual(10, remaining_ticks(10, 0.0, 0.015625))
        self.assertEqual(9, remaining_ticks(10, 0.0, 0.03125))

    def test_remaining_ticks_counting(self):
        self.assertEqual(7, remaining_ticks(10, 0.0, 0.0625))
        self.assertEqual(3, remaining_ticks(10, 0.0, 0.125))
        self.assertEqual(3, remaining_ticks(10, 2.0, 2.125))

    def test_remaining_ticks_saturates(self):
        self.assertEqual(0, remaining_ticks(10, 0.0, 0.25))
        self.assertEqual(0, remaining_ticks(10, 0.0, 3600.0))
        self.assertEqual(0, remaining_ticks(0, 0.0, 0.0))

    def test_remaining_ticks_large_values(self):
        self.assertEqual(255, remaining_ticks(255, 0.0, 0.0))
        self.assertEqual(195, remaining_ticks(255, 0.0, 1.0))


class TestTimer(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.timer = Timer(self.clock)

    def test_timer_unarmed(self):
        self.assertFalse(self.timer.is_armed())
        self.assertEqual(0, self.timer.read())
        self.clock.now += 10
        self.assertEqual(0, self.timer.read())

    def test_timer_counts_down_without_cycles(self):
        self.timer.arm(60)
        self.assertTrue(self.timer.is_armed())
        self.assertEqual(60, self.timer.read())
        self.clock.now += 0.5
        self.assertEqual(30, self.timer.read())
        self.clock.now += 0.5
        self.assertEqual(0, self.timer.read())

    def test_timer_rearm(self):
        self.timer.arm(60)
        self.clock.now += 2
        self.assertEqual(0, self.timer.read())
        self.timer.arm(3)
        self.assertEqual(3, self.timer.read())

    def test_timer_real_clock(self):
        timer = Timer()
        timer.arm(10)
        self.assertIn(timer.read(), (9, 10))
