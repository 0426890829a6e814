#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the interpreter, replacing args with a
dictionary of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.

Returns False if the program could not be loaded, in which case nothing is
started, otherwise True once the program exits or the user quits.
"""

__copyright__ = "Copyright (C) 2024 NibbleChip Developers"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_KEYMAP, MEM_SIZE, STACK_DEPTH
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .hostio import Loader
from .keypad import Keypad
from .ram import RAM
from .stack import Stack


class StartupError(Exception):
    pass


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))

    # Set up debugger (the log sink) and live output if necessary
    debugger = Debugger()
    debugger.set_live(args["debug"])

    # Read the program binary first, so nothing is started if it is missing
    filename = args["filename"]

    try:
        program = Loader().load_binary(filename)
    except OSError:
        debugger.log("File not found {}".format(filename))
        return False

    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then Curses.

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                opt_renderer = "curses"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

    if opt_renderer == "curses":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import curses
        except ImportError:
            if auto_select_renderer:
                raise StartupError(
                    "Neither PyGame nor Curses (or Windows-Curses) appear to be installed."
                )

            raise StartupError(
                "Curses (or Windows-Curses) does not appear to be installed."
            )
        else:
            from .inputs.i_curses import Inputs
            from .renderers.r_curses import Renderer

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer

    # The keymap is checked before any window or terminal is taken over
    keypad = Keypad(args["keymap"] or DEFAULT_KEYMAP, force_lowercase=Inputs.FORCE_LOWERCASE)

    ram = RAM()
    ram.resize(MEM_SIZE)

    renderer = Renderer(
        scale=args["scale"],
        pygame_palette=args["pygame_palette"],
        curses_cursor_mode=args["curses_cursor_mode"]
    )

    try:
        # Set up host inputs, and link to the chosen rendering module in case it provides inputs too
        inputs = Inputs(renderer)

        try:
            # Create a new CPU, plug it into the rest of the system, load the program and boot it up
            cpu = CPU(ram, Stack(STACK_DEPTH), Framebuffer(), keypad, renderer, inputs, debugger)
            cpu.load(program)
            cpu.run()
        finally:
            inputs.shutdown()
    finally:
        # The CPU has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        renderer.shutdown()

    return True
