#!/usr/bin/env python3

"""
Instruction Decoder

Splits a 16-bit opcode into its four nibbles and matches it against the table
of known instruction patterns.  The result is an Instruction tuple holding the
pattern name (e.g. "8xy4") and every operand form:

    x   = second nibble (register)
    y   = third nibble (register)
    n   = fourth nibble
    nn  = low byte
    nnn = low 12 bits (address)

Handlers pick whichever operands they need.  Patterns are checked in order and
the first match wins, so the specific 0x00?? instructions must come before the
0nnn catch-all.

Opcodes which match no pattern decode to an Instruction with a name of None.
Decoding never touches the CPU, so it can be used by disassemblers and
debuggers too.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple

# (mask, match, name, assembly)
PATTERNS = (
    (0xFFF0, 0x00C0, "00Cn", "SCD V{n:01x}"),
    (0xFFFF, 0x00FB, "00FB", "SCR"),
    (0xFFFF, 0x00FC, "00FC", "SCL"),
    (0xFFFF, 0x00FD, "00FD", "EXIT"),
    (0xFFFF, 0x00FE, "00FE", "LOW"),
    (0xFFFF, 0x00FF, "00FF", "HIGH"),
    (0xFFFF, 0x00E0, "00E0", "CLS"),
    (0xFFFF, 0x00EE, "00EE", "RET"),
    (0xF000, 0x0000, "0nnn", "SYS 0x{nnn:03x}"),
    (0xF000, 0x1000, "1nnn", "JP 0x{nnn:03x}"),
    (0xF000, 0x2000, "2nnn", "CALL 0x{nnn:03x}"),
    (0xF000, 0x3000, "3xkk", "SE V{x:01x}, 0x{nn:02x}"),
    (0xF000, 0x4000, "4xkk", "SNE V{x:01x}, 0x{nn:02x}"),
    (0xF00F, 0x5000, "5xy0", "SE V{x:01x}, V{y:01x}"),
    (0xF000, 0x6000, "6xkk", "LD V{x:01x}, 0x{nn:02x}"),
    (0xF000, 0x7000, "7xkk", "ADD V{x:01x}, 0x{nn:02x}"),
    (0xF00F, 0x8000, "8xy0", "LD V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8001, "8xy1", "OR V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8002, "8xy2", "AND V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8003, "8xy3", "XOR V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8004, "8xy4", "ADD V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8005, "8xy5", "SUB V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8006, "8xy6", "SHR V{x:01x}, V{y:01x}"),
    (0xF00F, 0x8007, "8xy7", "SUBN V{x:01x}, V{y:01x}"),
    (0xF00F, 0x800E, "8xyE", "SHL V{x:01x}, V{y:01x}"),
    (0xF00F, 0x9000, "9xy0", "SNE V{x:01x}, V{y:01x}"),
    (0xF000, 0xA000, "Annn", "LD I, 0x{nnn:03x}"),
    (0xF000, 0xB000, "Bnnn", "JP V0, 0x{nnn:03x}"),
    (0xF000, 0xC000, "Cxkk", "RND V{x:01x}, 0x{nn:02x}"),
    (0xF000, 0xD000, "Dxyn", "DRW V{x:01x}, V{y:01x}, 0x{n:01x}"),
    (0xF0FF, 0xE09E, "Ex9E", "SKP V{x:01x}"),
    (0xF0FF, 0xE0A1, "ExA1", "SKNP V{x:01x}"),
    (0xF0FF, 0xF007, "Fx07", "LD V{x:01x}, DT"),
    (0xF0FF, 0xF00A, "Fx0A", "LD V{x:01x}, K"),
    (0xF0FF, 0xF015, "Fx15", "LD DT, V{x:01x}"),
    (0xF0FF, 0xF018, "Fx18", "LD ST, V{x:01x}"),
    (0xF0FF, 0xF01E, "Fx1E", "ADD I, V{x:01x}"),
    (0xF0FF, 0xF029, "Fx29", "LD F, V{x:01x}"),
    (0xF0FF, 0xF030, "Fx30", "LD HF, V{x:01x}"),
    (0xF0FF, 0xF033, "Fx33", "LD B, V{x:01x}"),
    (0xF0FF, 0xF055, "Fx55", "LD [I], V{x:01x}"),
    (0xF0FF, 0xF065, "Fx65", "LD V{x:01x}, [I]"),
    (0xF0FF, 0xF075, "Fx75", "LD R, V{x:01x}"),
    (0xF0FF, 0xF085, "Fx85", "LD V{x:01x}, R")
)

# Group the patterns by first nibble for a faster lookup, keeping the table order within each group
PATTERNS_BY_NIBBLE = {}

for _pattern in PATTERNS:
    PATTERNS_BY_NIBBLE.setdefault(_pattern[1] >> 12, []).append(_pattern)

ASSEMBLY = {name: assembly for _, _, name, assembly in PATTERNS}


class Instruction(namedtuple("Instruction", ["name", "opcode", "x", "y", "n", "nn", "nnn"])):
    __slots__ = ()

    @property
    def nibbles(self):
        opcode = self.opcode
        return opcode >> 12, (opcode >> 8) & 0xF, (opcode >> 4) & 0xF, opcode & 0xF

    def disassemble(self):
        if self.name is None:
            return "???"

        return ASSEMBLY[self.name].format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)


def decode(opcode):
    name = None

    for mask, match, pattern_name, _ in PATTERNS_BY_NIBBLE.get(opcode >> 12, ()):
        if opcode & mask == match:
            name = pattern_name
            break

    return Instruction(
        name, opcode, (opcode >> 8) & 0xF, (opcode >> 4) & 0xF, opcode & 0xF, opcode & 0xFF, opcode & 0xFFF
    )
