#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here, and the whole buffer is handed to the host renderer
whenever the CPU reports it has changed.  Programs cannot write into video RAM
directly.  Instead, sprites are drawn to the screen using an XOR method, so
drawing the same sprite twice in the same place erases it again.

Collisions (where any pixel was set, but was unset by an XOR) are reported
back to the caller.

The buffer is always 64x32, one byte per pixel.  Switching to high resolution
mode only changes how the CPU reads sprite data; the buffer is neither resized
nor cleared.

Sprites are not wrapped or clipped at the screen edges.  Setting a pixel
outside the screen is treated as a fault, as there is no sensible place for it
to go.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM


class FramebufferError(Exception):
    pass


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM()
        self.vram.resize(self.vid_size)
        self.hgr = False

    def clear(self):
        self.vram.clear()

    def set_hgr(self, enabled):
        self.hgr = enabled

    def get_pixel(self, x, y):
        return self.vram.read(y * self.vid_width + x)

    def get_pixels(self):
        # Renderers get a read-only view, so only the CPU can change the screen
        return self.vram.mem.toreadonly()

    def get_vid_size(self):
        return self.vid_width, self.vid_height

    def xor_pixel(self, x, y):
        # Returns True if a lit pixel was switched off
        if x >= self.vid_width or y >= self.vid_height:
            raise FramebufferError("Pixel ({}, {}) is outside the {}x{} screen".format(
                x, y, self.vid_width, self.vid_height
            ))

        vram_loc = y * self.vid_width + x
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)

        return pixel != 0

    def draw_sprite(self, x, y, rows, bit_width=8, columns=8):
        # Each row is an integer 'bit_width' bits wide, drawn most-significant bit first.  Only the first 'columns'
        # bits of each row are looked at.
        top_bit = 1 << (bit_width - 1)
        collision = False

        for row_num, row_data in enumerate(rows):
            for col in range(columns):
                if row_data & (top_bit >> col):
                    if self.xor_pixel(x + col, y + row_num):
                        # Don't stop drawing
                        collision = True

        return collision

    def scroll_down(self, rows):
        # Rows scrolled in at the top keep whatever they held before.  Scrolling by the full height (or more) leaves
        # the screen untouched.
        if rows >= self.vid_height:
            return

        self.vram.move_mem(rows * self.vid_width)
