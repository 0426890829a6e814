#!/usr/bin/env python3

"""
Null Input Plugin

Serves as a base class for other Input plugins.  Can be used on its own if zero
input functionality is required.

Input plugins only report which physical keys (keyscan codes or character
numbers) are currently held.  Mapping them onto the 16 emulated keys is left
to the Keypad.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"


class InputsError(Exception):
    pass


class Inputs:
    # Set if this plugin reports characters rather than keyscan codes, so the keymap should be lowercased to match
    FORCE_LOWERCASE = False

    def __init__(self, renderer):
        self.renderer = renderer

    def process_messages(self):
        return False  # Don't exit the program

    def get_pressed_keys(self):
        return []  # No keys are held

    def shutdown(self):
        pass
