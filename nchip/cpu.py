#!/usr/bin/env python3

"""
CPU Emulator

Like a real computer, this is where most of the processing happens.  Each
cycle fetches one 2-byte opcode, decodes it into an Instruction, and calls the
matching handler.  Every handler moves the program counter on itself, so
instructions which stall (waiting for a key) simply leave it where it is and
run again on the next cycle.

The run loop executes instructions at a fixed rate, polls the host inputs on
every pass, and hands the framebuffer to the renderer whenever an instruction
has drawn something.

Timers are not decremented here.  They work out their own value from the
wall clock when read (see 'timers').

Any fault (unknown opcode, machine language call, stack or memory misuse, or
drawing off-screen) halts the machine.  Unknown opcodes in particular are not
skipped, since nothing good can come of executing data.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from time import perf_counter, sleep
from random import randint
from .constants import (
    APP_INTRO, APP_NAME, CLOCK_SPEED, EXIT_PC, HGR_SPRITE_COLS, HGR_SPRITE_ROWS, NUM_REGISTERS, PROGRAM_START,
    SYSFONT_BG_LOC, SYSFONT_SM_LOC
)
from .decoder import decode
from .fonts import BIG_FONT, BIG_GLYPH_SIZE, SMALL_FONT, SMALL_GLYPH_SIZE
from .timers import Timer

CPU_ENDIAN = "big"  # CHIP-8 is big-endian
PERF_REPORT_INTERVAL = 1.0


class CPUError(Exception):
    pass


class CPU:
    def __init__(self, ram, stack, framebuffer, keypad, renderer, inputs, debugger, clock=perf_counter, sleeper=sleep):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.keypad = keypad
        self.renderer = renderer
        self.inputs = inputs
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.clock = clock
        self.sleeper = sleeper
        self.cycle_interval = 1.0 / CLOCK_SPEED

        # Handlers, looked up by the pattern names given by the decoder.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            "00Cn": self._00Cn,
            "00FB": self._00FB,
            "00FC": self._00FC,
            "00FD": self._00FD,
            "00FE": self._00FE,
            "00FF": self._00FF,
            "00E0": self._00E0,
            "00EE": self._00EE,
            "0nnn": self._0nnn,
            "1nnn": self._1nnn,
            "2nnn": self._2nnn,
            "3xkk": self._3xkk,
            "4xkk": self._4xkk,
            "5xy0": self._5xy0,
            "6xkk": self._6xkk,
            "7xkk": self._7xkk,
            "8xy0": self._8xy0,
            "8xy1": self._8xy1,
            "8xy2": self._8xy2,
            "8xy3": self._8xy3,
            "8xy4": self._8xy4,
            "8xy5": self._8xy5,
            "8xy6": self._8xy6,
            "8xy7": self._8xy7,
            "8xyE": self._8xyE,
            "9xy0": self._9xy0,
            "Annn": self._Annn,
            "Bnnn": self._Bnnn,
            "Cxkk": self._Cxkk,
            "Dxyn": self._Dxyn,
            "Ex9E": self._Ex9E,
            "ExA1": self._ExA1,
            "Fx07": self._Fx07,
            "Fx0A": self._Fx0A,
            "Fx15": self._Fx15,
            "Fx18": self._Fx18,
            "Fx1E": self._Fx1E,
            "Fx29": self._Fx29,
            "Fx30": self._Fx30,
            "Fx33": self._Fx33,
            "Fx55": self._Fx55,
            "Fx65": self._Fx65,
            "Fx75": self._Fx75,
            "Fx85": self._Fx85
        }

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so this should be fast
        self.rpl = memoryview(bytearray(NUM_REGISTERS))  # Persistent flags, only touched by Fx75/Fx85
        self.i = 0  # Index register

        # Initialise timers
        self.delay_timer = Timer(clock)
        self.sound_timer = Timer(clock)  # Tracked, but there is no buzzer

        # Initialise program counter and current opcode
        self.pc = PROGRAM_START
        self.opcode = 0

        # Display-related vars
        self.draw_flag = False
        self.renderer.set_resolution(*self.framebuffer.get_vid_size())

        # Performance-related vars
        self.perf_counter_fps = 0
        self.perf_counter_ops = 0
        self.next_perf_report_time = 0
        self.report_perf()

    def install_fonts(self):
        self.ram.write_block(SYSFONT_SM_LOC, SMALL_FONT)
        self.ram.write_block(SYSFONT_BG_LOC, BIG_FONT)

    def load(self, program):
        # Fonts always go in first, so a program large enough to reach them would be caught by RAM instead
        self.install_fonts()
        self.ram.write_block(PROGRAM_START, program)

    def is_halted(self):
        return self.pc == EXIT_PC

    def run(self):
        next_cycle_time = 0

        while not self.is_halted():
            this_time = self.clock()

            # Performance counters
            if this_time >= self.next_perf_report_time:
                self.next_perf_report_time = this_time + PERF_REPORT_INTERVAL
                self.report_perf(self.perf_counter_fps, self.perf_counter_ops)
                self.perf_counter_ops = 0
                self.perf_counter_fps = 0

            if self.inputs.process_messages():
                # Host asked to quit
                return

            self.keypad.refresh(self.inputs.get_pressed_keys())

            if this_time < next_cycle_time:
                self.sleeper(next_cycle_time - this_time)
                continue

            # Measured from this cycle, so a slow host loses cycles rather than bursting to catch up
            next_cycle_time = this_time + self.cycle_interval
            self.cycle()
            self.perf_counter_ops += 1

            if self.draw_flag:
                self.refresh_display()
                self.perf_counter_fps += 1

        # One last draw, so the final screen stays visible
        self.refresh_display()

    def cycle(self):
        if self.is_halted():
            raise CPUError("Cannot execute after the program has exited")

        self.opcode = self.fetch()
        instruction = decode(self.opcode)

        if self.live_debug:
            self.debugger.output(self, instruction.disassemble())

        handler = self.instructions.get(instruction.name)

        if handler is None:
            self._opcode_unsupported(
                instruction, "Unknown opcode 0x{:04x} at address 0x{:03x}".format(self.opcode, self.pc)
            )

        handler(instruction)

    def fetch(self):
        return int.from_bytes(self.ram.read_block(self.pc, 2), CPU_ENDIAN, signed=False)

    def refresh_display(self):
        self.renderer.draw(self.framebuffer.get_pixels())
        self.draw_flag = False

    def report_perf(self, fps=0, ops=0):
        self.renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, fps, ops))

    def _opcode_unsupported(self, instruction, message):
        self.debugger.log(message)

        raise CPUError(
            "Emulation halted.\n\n{}Debug info:\n{}\n\n{}".format(
                APP_INTRO, self.debugger.debug(self, instruction.disassemble(), verbose=True), message
            )
        ) from None

    def _next(self):
        self.pc += 2

    def _skip_if(self, condition):
        self.pc += 4 if condition else 2

    # Display control

    def _00E0(self, ins):  # CLS
        self.framebuffer.clear()
        self.draw_flag = True
        self._next()

    def _00Cn(self, ins):  # SCD Vn
        # The row count comes from the register named by the low nibble, not the nibble itself
        self.framebuffer.scroll_down(self.v[ins.n])
        self.draw_flag = True
        self._next()

    def _00FB(self, ins):  # SCR
        # Accepted, but the screen does not move
        self._next()

    def _00FC(self, ins):  # SCL
        # Accepted, but the screen does not move
        self._next()

    def _00FE(self, ins):  # LOW
        self.framebuffer.set_hgr(False)
        self._next()

    def _00FF(self, ins):  # HIGH
        self.framebuffer.set_hgr(True)
        self._next()

    # Flow control

    def _00FD(self, ins):  # EXIT
        self.pc = EXIT_PC

    def _00EE(self, ins):  # RET
        # The stack holds the address of the CALL itself, so step over it
        self.pc = self.stack.pop() + 2

    def _0nnn(self, ins):  # SYS addr
        self._opcode_unsupported(
            ins, "Machine language routine at 0x{:03x} (called from 0x{:03x}) is not supported".format(ins.nnn, self.pc)
        )

    def _1nnn(self, ins):  # JP addr
        self.pc = ins.nnn

    def _2nnn(self, ins):  # CALL addr
        self.stack.push(self.pc)
        self.pc = ins.nnn

    def _Bnnn(self, ins):  # JP V0, addr
        self.pc = self.v[0] + ins.nnn

    def _3xkk(self, ins):  # SE Vx, byte
        self._skip_if(self.v[ins.x] == ins.nn)

    def _4xkk(self, ins):  # SNE Vx, byte
        self._skip_if(self.v[ins.x] != ins.nn)

    def _5xy0(self, ins):  # SE Vx, Vy
        self._skip_if(self.v[ins.x] == self.v[ins.y])

    def _9xy0(self, ins):  # SNE Vx, Vy
        self._skip_if(self.v[ins.x] != self.v[ins.y])

    # Registers and arithmetic

    def _6xkk(self, ins):  # LD Vx, byte
        self.v[ins.x] = ins.nn
        self._next()

    def _7xkk(self, ins):  # ADD Vx, byte
        # Unlike 8xy4, the flag is always cleared, carry or not
        self.v[ins.x] = (self.v[ins.x] + ins.nn) & 0xFF
        self.v[0xF] = 0
        self._next()

    def _8xy0(self, ins):  # LD Vx, Vy
        self.v[ins.x] = self.v[ins.y]
        self._next()

    def _8xy1(self, ins):  # OR Vx, Vy
        self.v[ins.x] |= self.v[ins.y]
        self._next()

    def _8xy2(self, ins):  # AND Vx, Vy
        self.v[ins.x] &= self.v[ins.y]
        self._next()

    def _8xy3(self, ins):  # XOR Vx, Vy
        self.v[ins.x] ^= self.v[ins.y]
        self._next()

    def _8xy4(self, ins):  # ADD Vx, Vy
        val = self.v[ins.x] + self.v[ins.y]
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying
        self._next()

    def _post_8xy5_8xy7(self, ins, val):  # Post-SUB/SUBN
        # Vf is set when NOT borrowing, after Vx, in case Vf was the destination
        self.v[ins.x] = val & 0xFF
        self.v[0xF] = int(val >= 0)
        self._next()

    def _8xy5(self, ins):  # SUB Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.x] - self.v[ins.y])

    def _8xy7(self, ins):  # SUBN Vx, Vy
        self._post_8xy5_8xy7(ins, self.v[ins.y] - self.v[ins.x])

    def _8xy6(self, ins):  # SHR Vx, Vy
        # Vy is the source.  The flag is written first, so Vx wins if it is Vf.
        val = self.v[ins.y]
        self.v[0xF] = val & 1
        self.v[ins.x] = val >> 1
        self._next()

    def _8xyE(self, ins):  # SHL Vx, Vy
        val = self.v[ins.y]
        self.v[0xF] = val >> 7
        self.v[ins.x] = (val << 1) & 0xFF
        self._next()

    def _Cxkk(self, ins):  # RND Vx, byte
        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = randint(0, 0xFF) & ins.nn
        self._next()

    # Drawing

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        # Coordinates are read before Vf is cleared, in case either of them is Vf
        vx_pos = self.v[ins.x]
        vy_pos = self.v[ins.y]
        self.v[0xF] = 0

        if self.framebuffer.hgr and ins.n == 0:
            # High resolution sprite: 2 bytes per row, but only a 15x15 block of it is drawn
            spr_data = self.ram.read_block(self.i, HGR_SPRITE_ROWS * 2)
            rows = [(spr_data[y * 2] << 8) | spr_data[y * 2 + 1] for y in range(HGR_SPRITE_ROWS)]
            collision = self.framebuffer.draw_sprite(vx_pos, vy_pos, rows, 16, HGR_SPRITE_COLS)
        else:
            rows = self.ram.read_block(self.i, ins.n)
            collision = self.framebuffer.draw_sprite(vx_pos, vy_pos, rows, 8, 8)

        self.v[0xF] = int(collision)
        self.draw_flag = True
        self._next()

    # Input

    def _Ex9E(self, ins):  # SKP Vx
        self._skip_if(self.keypad.is_pressed(self.v[ins.x]))

    def _ExA1(self, ins):  # SKNP Vx
        self._skip_if(not self.keypad.is_pressed(self.v[ins.x]))

    def _Fx0A(self, ins):  # LD Vx, K
        # Rather than blocking, stay on this instruction until a key is latched.  Timers and the display carry on
        # regardless.
        key = self.keypad.last_key

        if key is not None:
            self.v[ins.x] = key
            self._next()

    # Timers

    def _Fx07(self, ins):  # LD Vx, DT
        self.v[ins.x] = self.delay_timer.read()
        self._next()

    def _Fx15(self, ins):  # LD DT, Vx
        self.delay_timer.arm(self.v[ins.x])
        self._next()

    def _Fx18(self, ins):  # LD ST, Vx
        self.sound_timer.arm(self.v[ins.x])
        self._next()

    # Index register and memory

    def _Annn(self, ins):  # LD I, addr
        self.i = ins.nnn
        self._next()

    def _Fx1E(self, ins):  # ADD I, Vx
        self.i = (self.i + self.v[ins.x]) & 0xFFFF
        self._next()

    def _Fx29(self, ins):  # LD F, Vx
        self.i = SYSFONT_SM_LOC + SMALL_GLYPH_SIZE * self.v[ins.x]
        self._next()

    def _Fx30(self, ins):  # LD HF, Vx
        self.i = SYSFONT_BG_LOC + BIG_GLYPH_SIZE * self.v[ins.x]
        self._next()

    def _Fx33(self, ins):  # LD B, Vx
        val = self.v[ins.x]
        i = self.i
        self.ram.write(i, val // 100)             # Most-significant digit
        self.ram.write(i + 1, (val // 10) % 10)   # Middle digit
        self.ram.write(i + 2, val % 10)           # Least-significant digit
        self._next()

    def _post_Fx55_Fx85(self, ins):
        # I always moves past the registers transferred, including for the persistent flags
        self.i = (self.i + ins.x + 1) & 0xFFFF
        self._next()

    def _Fx55(self, ins):  # LD [I], Vx
        i = self.i

        for reg in range(ins.x + 1):
            self.ram.write(i + reg, self.v[reg])

        self._post_Fx55_Fx85(ins)

    def _Fx65(self, ins):  # LD Vx, [I]
        # Ensure with +1s that the final register is copied
        self.v[:ins.x + 1] = self.ram.read_block(self.i, ins.x + 1)
        self._post_Fx55_Fx85(ins)

    def _Fx75(self, ins):  # LD R, Vx
        self.rpl[:ins.x + 1] = self.v[:ins.x + 1]
        self._post_Fx55_Fx85(ins)

    def _Fx85(self, ins):  # LD Vx, R
        self.v[:ins.x + 1] = self.rpl[:ins.x + 1]
        self._post_Fx55_Fx85(ins)
