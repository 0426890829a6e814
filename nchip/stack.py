#!/usr/bin/env python3

"""
Call Stack

The call stack lives outside system RAM, since programs have no way of
addressing it and no stack pointer register is exposed to them.  A list is
wrapped to emulate it, and the number of held return addresses acts as the
stack pointer (the index of the next free slot).

The stack has a fixed depth.  Calling too deeply, or returning with nothing on
the stack, halts the machine.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"


class StackError(Exception):
    pass


class Stack:
    def __init__(self, size):
        self.items = []
        self.size = size

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackError("Stack overflow (depth {})".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackError("Stack underflow") from None

    @property
    def sp(self):
        return len(self.items)

    def get_items(self):
        # For debugging
        return self.items
