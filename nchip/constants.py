#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "NibbleChip Interpreter"
APP_VERSION = "0.3.1"
APP_COPYRIGHT = "Copyright (C) 2024 NibbleChip Developers, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory map
MEM_SIZE = 0x1000
SYSFONT_SM_LOC = 0x50   # 4x5 digit glyphs, 16 x 5 bytes
SYSFONT_BG_LOC = 0xA0   # High resolution digit glyphs, 10 x 10 bytes
PROGRAM_START = 0x200

# Writing this to the program counter asks the run loop to stop fetching
EXIT_PC = 0xFFFF

STACK_DEPTH = 16
NUM_REGISTERS = 16
NUM_KEYS = 0x10

# Display is 64x32 in both resolution modes
VID_WIDTH = 64
VID_HEIGHT = 32

# High resolution sprites are a fixed block, regardless of the height nibble
HGR_SPRITE_ROWS = 15
HGR_SPRITE_COLS = 15

# Timing
CLOCK_SPEED = 550     # Instructions per second
TIMER_FREQ = 60       # Timers count down at 60Hz

# Default mappings for keys 0-F.  Laid out as 1234/QWER/ASDF/ZXCV on a QWERTY keyboard.  Keyscans (PyGame) and
# character numbers (Curses) are the same for these keys
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"
