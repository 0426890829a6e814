#!/usr/bin/env python3

"""
Log Sink and Instruction Tracer

Every diagnostic the interpreter produces (a missing program file, an unknown
opcode, a machine language call) goes through 'log', which currently just
prints it.

Tracing is switched on with 'set_live'.  The CPU then calls 'output' before
each instruction, giving one line holding:
    * V  - All 16 general registers, Vf first and V0 last
    * I  - Index register
    * DT - Delay timer
    * ST - Sound timer
    * PC - Program counter
    * OP - Opcode
    * IN - Disassembled instruction

Fault reports use the verbose form, which appends two more lines:
    * RPL   - Persistent flag registers, in the same order as V
    * Stack - Return addresses, oldest first
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

STATE_FORMAT = "V: 0x{} I: 0x{:04x} DT: 0x{:02x} ST: 0x{:02x} PC: 0x{:03x} OP: 0x{:04x} IN: {}"


def hex_registers(registers):
    # Highest register on the left, so the dump reads like one big number
    return "".join("{:02x}".format(registers[reg_num]) for reg_num in reversed(range(len(registers))))


class Debugger:
    def __init__(self):
        self.live = False

    def debug(self, cpu, instruction, verbose=False):
        lines = [
            STATE_FORMAT.format(
                hex_registers(cpu.v), cpu.i, cpu.delay_timer.read(), cpu.sound_timer.read(), cpu.pc, cpu.opcode,
                instruction
            )
        ]

        if verbose:
            lines.append("RPL: 0x" + hex_registers(cpu.rpl))
            addresses = cpu.stack.get_items()

            if addresses:
                lines.append("Stack: " + " ".join("0x{:03x}".format(address) for address in addresses))
            else:
                lines.append("Stack: (Empty)")

        return "\n".join(lines)

    def set_live(self, enabled):
        self.live = enabled

    def is_live(self):
        return self.live

    def output(self, cpu, instruction):
        self.log(self.debug(cpu, instruction))

    def log(self, message):
        print(message)
