#!/usr/bin/env python3

"""
Keypad Input Latch

The emulated machine has a 16-key hex keypad.  Once per run loop iteration,
the host input plugin reports which physical keys are held, and these are
mapped onto the 16 logical keys via the keymap.

The first mapped key found (in the order the plugin reports them) is latched
as the 'last key'.  The latch is rewritten on every refresh, so it only ever
holds a key that is currently down.  The wait-for-key instruction polls this.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from .constants import NUM_KEYS


class KeypadError(Exception):
    pass


def parse_keymap(keymap, force_lowercase=False):
    # Returns a dictionary of physical key code -> logical key number
    keymap_dict = {}
    keymap_split = keymap.split(",")

    if len(keymap_split) != NUM_KEYS:
        raise KeypadError("Incorrect number of keys defined -- 16 required.  Use commas to split numbers")

    for key_num, key_defined in enumerate(keymap_split):
        try:
            key_defined_ord = int(key_defined)
        except ValueError:
            raise KeypadError("Defined keys are not all integer values") from None

        if force_lowercase:
            # If we are working with characters rather than keyscan codes, we should convert to lowercase
            key_defined_ord = ord(chr(key_defined_ord).lower())

        if key_defined_ord in keymap_dict:
            raise KeypadError("Duplicate keys defined")

        keymap_dict[key_defined_ord] = key_num

    return keymap_dict


class Keypad:
    def __init__(self, keymap, force_lowercase=False):
        self.keymap_dict = parse_keymap(keymap, force_lowercase)
        self.keys = bytearray(NUM_KEYS)
        self.last_key = None

    def refresh(self, pressed):
        keys = self.keys
        keymap_dict = self.keymap_dict
        last_key = None

        for key_num in range(NUM_KEYS):
            keys[key_num] = 0

        for physical_key in pressed:
            key_num = keymap_dict.get(physical_key)

            if key_num is None:
                continue

            keys[key_num] = 0xFF

            if last_key is None:
                last_key = key_num

        self.last_key = last_key

    def is_pressed(self, key_num):
        if not 0 <= key_num < NUM_KEYS:
            raise KeypadError("Key 0x{:02x} does not exist".format(key_num))

        return self.keys[key_num] != 0
