#!/usr/bin/env python3

"""
RAM Emulator

Supports reading and writing of blocks of memory or individual bytes.  Also
supports fast moving (copying) and zeroing of memory blocks.

Every access is checked against the allocated size.  Programs which run off
the end of memory are halted, rather than being allowed to read garbage.

The Framebuffer also keeps its pixels in a RAM bank, which is where moving
memory is used (for scrolling).
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"


class RAMError(Exception):
    pass


class RAM:
    def __init__(self):
        self.resize(0)

    def resize(self, mem_size):
        self.mem = memoryview(bytearray(b"\x00" * mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

    def read(self, location):
        self.check_overflow(location)
        return self.mem[location]

    def read_block(self, location, size=1):
        if size > 0:
            self.check_overflow(location + size - 1)

        self.check_overflow(location)
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)

        if not block_size:
            return

        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.check_overflow(location)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top or location < 0:
            raise RAMError("Memory access out of range at 0x{:04x}".format(location))

    def move_mem(self, offset):
        # Fast slice-based memory mover.  Leaves original data behind, which is relied upon when scrolling.
        if offset == 0 or abs(offset) >= self.mem_size:
            return

        if offset < 0:
            self.mem[:offset] = self.mem[-offset:]
        else:
            self.mem[offset:] = self.mem[:-offset]

    def zero_block(self, location, size):
        if size <= 0:
            return

        block_top = location + size
        self.check_overflow(block_top - 1)
        self.check_overflow(location)
        self.mem[location:block_top] = bytes(size)

    def clear(self):
        self.zero_block(0, self.mem_size)
