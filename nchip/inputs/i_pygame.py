#!/usr/bin/env python3

"""
PyGame Input Plugin

Unlike the Curses plugin, this properly detects key 'press' and 'release'
events.  Held keys are reported in the order they were pressed.

If the window is closed, or ESC is released, the emulator is asked to quit.
This will also shut PyGame down, so any linked Renderer must be able to
handle that.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def __init__(self, renderer):
        self.keys_held = {}  # Used as an ordered set

        self.pygame_methods = {
            pygame.QUIT:    self._pygame_quit,
            pygame.KEYDOWN: self._pygame_keydown,
            pygame.KEYUP:   self._pygame_keyup
        }

        super().__init__(renderer)

    def process_messages(self):
        # Call PyGame method based on fast dictionary lookup of event
        quit_program = False

        for event in pygame.event.get():
            pygame_method = self.pygame_methods.get(event.type)

            if pygame_method and pygame_method(event):  # Check via short circuit that we don't have 'None'
                quit_program = True  # Process more events, even if planning to quit

        return quit_program

    def _pygame_quit(self, _):
        return True

    def _pygame_keydown(self, event):
        self.keys_held[event.key] = True
        return False

    def _pygame_keyup(self, event):
        if event.key == pygame.K_ESCAPE:
            return True

        self.keys_held.pop(event.key, None)
        return False

    def get_pressed_keys(self):
        return list(self.keys_held)
