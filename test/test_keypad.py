#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nchip.constants import DEFAULT_KEYMAP
from nchip.keypad import Keypad, KeypadError, parse_keymap


class TestKeymap(unittest.TestCase):
    def test_keymap_default(self):
        keymap_dict = parse_keymap(DEFAULT_KEYMAP)
        self.assertEqual(16, len(keymap_dict))
        self.assertEqual(0x0, keymap_dict[ord("x")])
        self.assertEqual(0x1, keymap_dict[ord("1")])
        self.assertEqual(0xC, keymap_dict[ord("4")])
        self.assertEqual(0xF, keymap_dict[ord("v")])

    def test_keymap_lowercase(self):
        keymap = ",".join(str(ord(char)) for char in "X123QWEASDZC4RFV")
        self.assertEqual(0x0, parse_keymap(keymap, force_lowercase=True)[ord("x")])
        self.assertEqual(0x0, parse_keymap(keymap)[ord("X")])

    def test_keymap_wrong_count(self):
        self.assertRaises(KeypadError, parse_keymap, "1,2,3")

    def test_keymap_not_integers(self):
        self.assertRaises(KeypadError, parse_keymap, ",".join(["a"] * 16))

    def test_keymap_duplicates(self):
        self.assertRaises(KeypadError, parse_keymap, ",".join(["49"] * 16))


class TestKeypad(unittest.TestCase):
    def setUp(self):
        self.keypad = Keypad(DEFAULT_KEYMAP)

    def test_keypad_initial(self):
        self.assertEqual(bytearray(16), self.keypad.keys)
        self.assertIsNone(self.keypad.last_key)

    def test_keypad_refresh(self):
        self.keypad.refresh([ord("w"), ord("v")])
        self.assertTrue(self.keypad.is_pressed(0x5))
        self.assertTrue(self.keypad.is_pressed(0xF))
        self.assertFalse(self.keypad.is_pressed(0x0))
        self.assertEqual(0x5, self.keypad.last_key)

    def test_keypad_first_mapped_key_latched(self):
        # Unmapped keys are skipped when choosing the latched key
        self.keypad.refresh([ord("p"), ord("v"), ord("w")])
        self.assertEqual(0xF, self.keypad.last_key)

    def test_keypad_refresh_overwrites(self):
        self.keypad.refresh([ord("w")])
        self.keypad.refresh([ord("1")])
        self.assertFalse(self.keypad.is_pressed(0x5))
        self.assertTrue(self.keypad.is_pressed(0x1))
        self.assertEqual(0x1, self.keypad.last_key)
        self.keypad.refresh([])
        self.assertFalse(self.keypad.is_pressed(0x1))
        self.assertIsNone(self.keypad.last_key)

    def test_keypad_unmapped_only(self):
        self.keypad.refresh([ord("p")])
        self.assertEqual(bytearray(16), self.keypad.keys)
        self.assertIsNone(self.keypad.last_key)

    def test_keypad_key_out_of_range(self):
        self.assertRaises(KeypadError, self.keypad.is_pressed, 0x10)
