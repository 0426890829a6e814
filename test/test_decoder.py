#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from nchip.decoder import PATTERNS, decode


class TestDecoder(unittest.TestCase):
    def test_decoder_operands(self):
        ins = decode(0xD12F)
        self.assertEqual("Dxyn", ins.name)
        self.assertEqual(0xD12F, ins.opcode)
        self.assertEqual((0xD, 0x1, 0x2, 0xF), ins.nibbles)
        self.assertEqual(0x1, ins.x)
        self.assertEqual(0x2, ins.y)
        self.assertEqual(0xF, ins.n)
        self.assertEqual(0x2F, ins.nn)
        self.assertEqual(0x12F, ins.nnn)

    def test_decoder_all_patterns(self):
        for opcode, name in (
            (0x00C3, "00Cn"), (0x00FB, "00FB"), (0x00FC, "00FC"), (0x00FD, "00FD"), (0x00FE, "00FE"),
            (0x00FF, "00FF"), (0x00E0, "00E0"), (0x00EE, "00EE"), (0x0123, "0nnn"), (0x1ABC, "1nnn"),
            (0x2ABC, "2nnn"), (0x3A12, "3xkk"), (0x4A12, "4xkk"), (0x5AB0, "5xy0"), (0x6A12, "6xkk"),
            (0x7A12, "7xkk"), (0x8AB0, "8xy0"), (0x8AB1, "8xy1"), (0x8AB2, "8xy2"), (0x8AB3, "8xy3"),
            (0x8AB4, "8xy4"), (0x8AB5, "8xy5"), (0x8AB6, "8xy6"), (0x8AB7, "8xy7"), (0x8ABE, "8xyE"),
            (0x9AB0, "9xy0"), (0xA123, "Annn"), (0xB123, "Bnnn"), (0xCA12, "Cxkk"), (0xDAB5, "Dxyn"),
            (0xEA9E, "Ex9E"), (0xEAA1, "ExA1"), (0xFA07, "Fx07"), (0xFA0A, "Fx0A"), (0xFA15, "Fx15"),
            (0xFA18, "Fx18"), (0xFA1E, "Fx1E"), (0xFA29, "Fx29"), (0xFA30, "Fx30"), (0xFA33, "Fx33"),
            (0xFA55, "Fx55"), (0xFA65, "Fx65"), (0xFA75, "Fx75"), (0xFA85, "Fx85")
        ):
            self.assertEqual(name, decode(opcode).name, "0x{:04x}".format(opcode))

    def test_decoder_every_pattern_covered(self):
        # Every table entry should decode its own match value to itself
        for _, match, name, _ in PATTERNS:
            self.assertEqual(name, decode(match).name)

    def test_decoder_zero_group_catch_all(self):
        # Anything in the 0 group that isn't a known system instruction is a machine language call
        for opcode in 0x0000, 0x00E1, 0x00EF, 0x00FA, 0x00D1, 0x0FFF:
            self.assertEqual("0nnn", decode(opcode).name)

    def test_decoder_unknown(self):
        for opcode in 0x5001, 0x8008, 0x800F, 0x9001, 0xE09F, 0xE0A2, 0xF000, 0xF0FF, 0xFFFF:
            ins = decode(opcode)
            self.assertIsNone(ins.name)
            self.assertEqual("???", ins.disassemble())

    def test_decoder_disassemble(self):
        self.assertEqual("LD V2, 0xfe", decode(0x62FE).disassemble())
        self.assertEqual("DRW V1, V2, 0x4", decode(0xD124).disassemble())
        self.assertEqual("JP 0x234", decode(0x1234).disassemble())
        self.assertEqual("SCD V3", decode(0x00C3).disassemble())
        self.assertEqual("CLS", decode(0x00E0).disassemble())
