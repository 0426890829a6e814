#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program binaries from storage for later writing into RAM.
Failing to read a file is left to the caller to report, as the run loop must
not be started without a program.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()
