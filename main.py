"""
pygame front-end for the Chipax CHIP-8 interpreter
"""

import argparse
import os
import time

import numpy as np
import pygame

from chipax import Machine, ChipaxError, chip8_display_to_rgb, create_color_scheme
from chipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, INSTRUCTION_FREQUENCY, TIMER_FREQUENCY
from chipax.logging import ConsoleLogger

# COSMAC VIP hex keypad on the left side of a QWERTY keyboard:
#   1 2 3 C      1 2 3 4
#   4 5 6 D  <-  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

SAMPLE_RATE = 44100
BEEP_HZ = 440


def make_beep() -> pygame.mixer.Sound:
    """One second of square wave, looped while the sound timer runs."""
    t = np.arange(SAMPLE_RATE)
    wave = np.where((t * BEEP_HZ * 2 // SAMPLE_RATE) % 2 == 0, 1, -1) * 8000
    return pygame.sndarray.make_sound(wave.astype(np.int16))


def parse_args():
    parser = argparse.ArgumentParser(description="Run a CHIP-8 ROM")
    parser.add_argument("rom", help="Path to a CHIP-8 program image")
    parser.add_argument("--ips", type=int, default=INSTRUCTION_FREQUENCY,
                        help="Instructions executed per second")
    parser.add_argument("--scale", type=int, default=8, help="Window pixels per CHIP-8 pixel")
    parser.add_argument("--color-scheme", default="classic", help="Display color scheme")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the CXNN random source")
    parser.add_argument("--headless", type=int, metavar="N", default=None,
                        help="Run N instructions without a window and exit")
    parser.add_argument("--log-level", default="INFO", help="Console log level")
    return parser.parse_args()


def reload_rom(machine: Machine, rom_filename: str, logger: ConsoleLogger) -> bool:
    """Reload the ROM from disk. Returns False, leaving the machine reset, if it fails."""
    try:
        machine.load_file(rom_filename)
    except (ChipaxError, OSError) as e:
        logger.error(f"Could not reload {rom_filename}: {e}")
        return False
    return True


def run_headless(machine: Machine, n: int, logger: ConsoleLogger):
    start = time.time()
    machine.run(n, progress=True)
    elapsed = time.time() - start
    logger.info(f"Executed {n:,} instructions in {elapsed:.2f}s, PC=0x{int(machine.state.pc):03X}")


def run_emulator(machine: Machine, rom_filename: str, scale: int, color_scheme: str, logger: ConsoleLogger):
    """Main emulator loop, one iteration per 60 Hz timer tick"""
    pygame.mixer.pre_init(SAMPLE_RATE, -16, 1)
    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    clock = pygame.time.Clock()
    try:
        beep = make_beep()
    except pygame.error as e:
        logger.warning(f"Audio unavailable, running muted: {e}")
        beep = None
    beeping = False

    on_color, off_color = create_color_scheme(color_scheme)
    rom_name = os.path.basename(rom_filename)
    ipf = machine.instructions_per_frame

    running = True
    paused = False
    frame_count = 0
    fps_start_time = time.time()

    logger.info("Controls: ESC=Quit, P=Pause, F5=Reset, +/-=Speed")

    while running:
        clock.tick(TIMER_FREQUENCY)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                    logger.info("Paused" if paused else "Resumed")
                elif event.key == pygame.K_F5:
                    paused = not reload_rom(machine, rom_filename, logger)
                elif event.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    ipf = min(100, ipf + 2)
                    logger.info(f"Speed: {ipf * TIMER_FREQUENCY} instructions/s")
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    ipf = max(1, ipf - 2)
                    logger.info(f"Speed: {ipf * TIMER_FREQUENCY} instructions/s")
                elif event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], True)
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    machine.set_key(KEY_MAP[event.key], False)

        if not paused:
            try:
                machine.run(ipf)
            except ChipaxError as e:
                logger.error(f"Execution stopped: {e}")
                paused = True
            machine.tick_timers()

        sound_on = beep is not None and machine.is_sound_active() and not paused
        if sound_on and not beeping:
            beep.play(loops=-1)
        elif not sound_on and beeping:
            beep.stop()
        beeping = sound_on

        if machine.consume_dirty_flag():
            rgb = chip8_display_to_rgb(machine.get_framebuffer(), scale, on_color, off_color)
            # pygame surfaces are indexed [x, y]
            pygame.surfarray.blit_array(screen, rgb.transpose(1, 0, 2))
            pygame.display.flip()

        frame_count += 1
        now = time.time()
        if now - fps_start_time >= 0.5:
            fps = frame_count / (now - fps_start_time)
            pygame.display.set_caption(f"Chipax - {rom_name} [{fps:.1f} FPS]")
            frame_count = 0
            fps_start_time = now

    pygame.quit()


def main():
    args = parse_args()
    logger = ConsoleLogger("Chipax", log_level=args.log_level)
    machine = Machine(seed=args.seed, instruction_frequency=args.ips, logger=logger)

    try:
        machine.load_file(args.rom)
    except (ChipaxError, OSError) as e:
        logger.error(f"Could not load {args.rom}: {e}")
        return 1

    if args.headless is not None:
        try:
            run_headless(machine, args.headless, logger)
        except ChipaxError as e:
            logger.error(f"Execution stopped: {e}")
            return 1
    else:
        run_emulator(machine, args.rom, args.scale, args.color_scheme, logger)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
