#!/usr/bin/env python3

"""
Curses TTY Terminal Input Plugin

Uses a thread to trap Terminal inputs and redirects them to the emulator.  Note
that standard TTY Terminals only understand characters, they do not know when
an actual key is 'pressed' or 'released'.

What we can do (for this plugin) is assume a key is held for a very short time,
and then take advantage of keyboard repeats to fake a 'press' and 'release'.

To do this, I've stored the last time each character has been 'seen'.  If it
was last seen a long time ago (when checked), then it has almost certainly been
released.

We will also quit if ESC (char 27) or CTRL+C (char 3) is detected.

The thread only ever touches the queues.  The character timers are owned by
the main thread.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

import queue
from threading import Thread
from time import time
from .i_null import Inputs as InputsBase

# Terminals don't have separate key press/release, so we have to pause after a character is seen.
KEYBOARD_FAKE_KEYDOWN_TIME = 0.2


# For thread safety, use proper queues to exchange information, avoiding shared variables.
def input_thread(thread_quitter_queue, input_queue, curses_screen):
    while thread_quitter_queue.empty():
        # This blocks the thread from proceeding, so it won't get the quit message until at least one key is pressed.
        # However, if set as a daemon thread, it should be terminated when the main thread shuts down.
        char = curses_screen.getch()

        if char < 0:
            continue

        char = ord(chr(char).lower())

        if char == 27 or char == 3:  # Detect ESC or CTRL+C
            input_queue.put(None, block=True)
            break

        try:
            input_queue.put(char, block=False)
        except queue.Full:
            pass


class Inputs(InputsBase):
    FORCE_LOWERCASE = True

    def __init__(self, renderer):
        self.char_timers = {}
        super().__init__(renderer)

        self.thread_quitter_queue = queue.Queue(1)  # Used to inform the thread it should quit
        self.input_queue = queue.Queue(16)
        self.thread = Thread(
            target=input_thread,
            args=(
                self.thread_quitter_queue,
                self.input_queue,
                renderer.get_curses_screen()
            )
        )
        # Terminate the thread when the main program quits (even if currently waiting for a keypress)
        self.thread.daemon = True
        self.thread.start()

    def shutdown(self):
        try:
            self.thread_quitter_queue.put(None, block=False)
        except queue.Full:
            # Something else has already requested the thread quits
            pass

        # Don't wait for the thread to quit (because this is likely to happen after a keypress)

    def process_messages(self):
        # Deal with any characters typed
        target_time = None

        while True:
            try:
                # Blocking here would lock up the main thread if nothing was pressed
                char = self.input_queue.get(block=False)
            except queue.Empty:
                break
            else:
                if char is None:
                    return True

                if target_time is None:
                    target_time = time() + KEYBOARD_FAKE_KEYDOWN_TIME

                # Re-insert, so the most recently seen character is reported last
                self.char_timers.pop(char, None)
                self.char_timers[char] = target_time

        return False

    def get_pressed_keys(self):
        now = time()

        for char in [char for char, char_time in self.char_timers.items() if char_time <= now]:
            # Released
            del self.char_timers[char]

        return list(self.char_timers)
