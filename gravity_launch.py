#!/usr/bin/env python3
"""
Gravity Launch application entry point: window, input and the two ticks.

What this module does
- Loads a level, builds the PhysicsWorld, the planet gravity field and the player's
  LaunchStateMachine, and wires the pygame-side collaborators into it.
- Runs one single-threaded loop. Every frame it polls pointer edges, runs as many fixed
  simulation ticks as the elapsed time calls for (controller first, then the world step),
  runs the presentation tick, and draws.

Collaborators provided here
- PathOverlay: receives the predicted path and the player indicator position.
- LevelSession: level lifecycle (activated/stopped notifications) and the gating predicates.
- LaunchAudio: plays the launch sound through pygame.mixer when audio is available.

Running
1) Install dependencies: `pip install -e .`
2) Run: `gravity-launch` or `python gravity_launch.py [--level 02_slingshot.json] [--verbose]`

Controls
- Hold left mouse to charge, release to launch. R restarts, N loads the next level,
  H toggles help (input is blocked while it is shown), Esc quits.
"""

import argparse
import logging
import math
import sys
import time
from array import array
from typing import List, Optional, Sequence

import pygame
from pygame import gfxdraw

from launch_core.camera import Camera
from launch_core.constants import (
    BACKGROUND_COLOR,
    FIXED_DT,
    HUD_COLOR,
    INDICATOR_COLOR,
    MAX_SUBSTEPS,
    PATH_COLOR,
    SAFE_COORD_LIMIT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from launch_core.controller import LaunchSettings, LaunchStateMachine
from launch_core.gravity import PlanetGravityField
from launch_core.levels import Level, list_levels, load_level
from launch_core.physics import PhysicsWorld
from launch_core.vector_utils import Vec3, vec_len, vec_sub

logger = logging.getLogger(__name__)

OUT_OF_BOUNDS_DISTANCE = 400.0  # m from the level centre before a flight counts as lost


# ============================================================
# Collaborators
# ============================================================

class PathOverlay:
    """Keeps what the controller last published so draw() can render it."""

    def __init__(self):
        self.path: List[Vec3] = []
        self.indicator: Optional[Vec3] = None

    def set_expected_path(self, positions: Sequence[Vec3]) -> None:
        self.path = list(positions)

    def show_player_indicator(self, position: Vec3) -> None:
        self.indicator = position


class LevelSession:
    """Level lifecycle for one attempt plus the input gating predicates."""

    def __init__(self, level: Level):
        self.level = level
        self.attempts = 0
        self.activated = False
        self.stopped = False
        self.lost = False
        self.help_visible = False
        self.launched_at: Optional[float] = None

    def reset(self) -> None:
        self.activated = False
        self.stopped = False
        self.lost = False
        self.launched_at = None

    def on_player_activated(self) -> None:
        self.activated = True
        self.attempts += 1
        self.launched_at = time.perf_counter()
        logger.info("Attempt %d on %s started", self.attempts, self.level.name)

    def on_player_stopped(self) -> None:
        self.stopped = True
        logger.info("Player stopped on %s", self.level.name)

    def mark_lost(self) -> None:
        if not self.stopped:
            self.lost = True
            logger.info("Player lost on %s", self.level.name)

    def can_shoot(self) -> bool:
        return not self.activated

    def ui_blocked(self) -> bool:
        return self.help_visible


class LaunchAudio:
    """Fire-and-forget launch sound; silent when no audio device is available."""

    def __init__(self, sound_path: Optional[str] = None):
        self.sound = None
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=22050, size=-16, channels=1)
            if sound_path:
                self.sound = pygame.mixer.Sound(sound_path)
            else:
                self.sound = pygame.mixer.Sound(buffer=_sweep_samples())
        except (pygame.error, FileNotFoundError) as exc:
            logger.warning("Launch sound unavailable: %s", exc)
            self.sound = None

    def play(self) -> None:
        if self.sound is not None:
            self.sound.play()


def _sweep_samples(duration: float = 0.25, rate: int = 22050) -> bytes:
    """Short rising 16-bit mono tone."""
    n = int(duration * rate)
    samples = array("h")
    phase = 0.0
    for i in range(n):
        t = i / n
        freq = 300.0 + 600.0 * t
        phase += 2.0 * math.pi * freq / rate
        samples.append(int(8000 * (1.0 - t) * math.sin(phase)))
    return samples.tobytes()


# ============================================================
# Game loop
# ============================================================

class GravityLaunchGame:
    """
    Pygame loop: fixed physics ticks, presentation tick, drawing.
    """

    def __init__(self, level_files: List[str], start_index: int = 0,
                 settings: Optional[LaunchSettings] = None, sound_path: Optional[str] = None):
        self.level_files = level_files
        self.level_index = start_index
        self.settings = settings or LaunchSettings()
        self.sound_path = sound_path
        self.camera = Camera(center=(0.0, 0.0))
        self.overlay = PathOverlay()
        self.surface = None
        self.clock = None
        self.audio = None
        self.running = True
        self.session: Optional[LevelSession] = None
        self.world: Optional[PhysicsWorld] = None
        self.controller: Optional[LaunchStateMachine] = None
        self._accumulator = 0.0
        self.bounds_center: Vec3 = (0.0, 0.0, 0.0)

    def load_current_level(self, keep_attempts: bool = False) -> bool:
        fn = self.level_files[self.level_index]
        level = load_level(fn)
        if level is None:
            logger.error("Level %s could not be loaded", fn)
            return False

        attempts = self.session.attempts if (keep_attempts and self.session) else 0
        self.session = LevelSession(level)
        self.session.attempts = attempts

        field = PlanetGravityField(level.planets)
        self.world = PhysicsWorld(field, fixed_dt=self.settings.fixed_dt)
        for planet in level.planets:
            self.world.add_planet(planet)
        self.world.add_body(level.player)

        self.overlay = PathOverlay()
        self.controller = LaunchStateMachine(
            body=level.player,
            engine=self.world,
            gravity_field=field,
            display=self.overlay,
            level=self.session,
            gameplay=self.session,
            aim_source=self.aim_point,
            sound=self.audio,
            settings=self.settings,
        )
        self._accumulator = 0.0
        self.bounds_center = level.center
        self.camera.frame([p.position for p in level.planets] + [level.player.position])
        pygame.display.set_caption(f"Gravity Launch - {level.name}")
        logger.info("Loaded level %s", level.name)
        return True

    def aim_point(self) -> Vec3:
        return self.camera.screen_to_world(pygame.mouse.get_pos(), self.camera.height)

    def run(self):
        pygame.init()
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.audio = LaunchAudio(self.sound_path)
        if not self.load_current_level():
            pygame.quit()
            return 1

        last_time = time.perf_counter()
        while self.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            pressed, released = self.handle_events()
            self.fixed_ticks(real_dt)
            self.controller.update(pressed, released)
            self.check_bounds()
            self.draw()

            self.clock.tick(60)

        pygame.quit()
        return 0

    def fixed_ticks(self, real_dt: float) -> None:
        dt = self.settings.fixed_dt
        self._accumulator = min(self._accumulator + real_dt, dt * MAX_SUBSTEPS)
        while self._accumulator >= dt:
            self.controller.on_fixed_tick()
            self.world.step()
            self._accumulator -= dt

    def check_bounds(self) -> None:
        player = self.controller.body
        if not self.session.activated or self.session.stopped or not player.alive:
            return
        if vec_len(vec_sub(player.position, self.bounds_center)) > OUT_OF_BOUNDS_DISTANCE:
            self.session.mark_lost()

    def handle_events(self):
        pressed = released = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0/1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                pressed = True

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                released = True

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_h:
                    self.session.help_visible = not self.session.help_visible
                elif event.key == pygame.K_r:
                    self.load_current_level(keep_attempts=True)
                elif event.key == pygame.K_n:
                    self.level_index = (self.level_index + 1) % len(self.level_files)
                    self.load_current_level()
        return pressed, released

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        for planet in self.world.planets:
            self.draw_disc(surf, planet.position, planet.radius, planet.color)

        player = self.controller.body
        if len(player.trail) > 1:
            pts = [p for p in (_safe_point(self.camera.world_to_screen(t)) for t in player.trail) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, player.color, False, pts)

        for i, p in enumerate(self.overlay.path):
            sp = _safe_point(self.camera.world_to_screen(p))
            if sp and i % 2 == 0:
                gfxdraw.filled_circle(surf, sp[0], sp[1], 2, PATH_COLOR)

        if player.alive:
            self.draw_disc(surf, player.position, player.radius, player.color)
        if player.alive and self.overlay.indicator is not None:
            sp = _safe_point(self.camera.world_to_screen(self.overlay.indicator))
            if sp:
                r = max(6, int(player.radius / self.camera.mpp) + 6)
                gfxdraw.aacircle(surf, sp[0], sp[1], r, INDICATOR_COLOR)

        self.draw_hud(surf)
        pygame.display.flip()

    def draw_disc(self, surf, position, radius, color):
        sp = _safe_point(self.camera.world_to_screen(position))
        if not sp:
            return
        vis_r = min(200, max(2, int(radius / self.camera.mpp)))
        gfxdraw.filled_circle(surf, sp[0], sp[1], vis_r, color)
        gfxdraw.aacircle(surf, sp[0], sp[1], vis_r, (0, 0, 0))

    def draw_hud(self, surf):
        session = self.session
        state = self.controller.state
        draw_text(surf, f"{session.level.name}  |  attempts: {session.attempts}", 10, 10, HUD_COLOR)
        if state.charging:
            power = min(self.controller.charge_elapsed() / self.settings.max_charge_time, 1.0)
            draw_text(surf, f"Power: {power * 100:.0f}%", 10, 30, HUD_COLOR)
        if state.destroyed or session.lost:
            draw_text(surf, "Crashed! Press R to retry", 10, 50, (255, 120, 120))
        elif session.stopped:
            draw_text(surf, "Goal reached! Press N for the next level", 10, 50, (120, 255, 120))
        if session.help_visible:
            draw_text(surf, "Hold left mouse to charge, release to launch | R: retry | N: next | H: help | Esc: quit",
                      10, 70, HUD_COLOR)
            if session.level.description:
                draw_text(surf, session.level.description, 10, 90, HUD_COLOR)


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        try:
            _cached_font = pygame.font.SysFont("consolas", 16)
        except (pygame.error, OSError):
            _cached_font = pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


# ============================================================
# Application Entry
# ============================================================

def main(argv=None):
    parser = argparse.ArgumentParser(description="Charge, aim and launch through gravity wells.")
    parser.add_argument("--level", help="level file name to start from (see levels/)")
    parser.add_argument("--sound", help="optional launch sound file")
    parser.add_argument("--max-speed", type=float, default=None)
    parser.add_argument("--charge-time", type=float, default=None)
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    files = [fn for fn, _ in list_levels()]
    if not files:
        logger.error("No levels found")
        return 1
    start = files.index(args.level) if args.level in files else 0

    kwargs = {"fixed_dt": FIXED_DT}
    if args.max_speed is not None:
        kwargs["max_speed"] = args.max_speed
    if args.charge_time is not None:
        kwargs["max_charge_time"] = args.charge_time
    try:
        settings = LaunchSettings(**kwargs)
    except ValueError as exc:
        parser.error(str(exc))

    return GravityLaunchGame(files, start, settings, args.sound).run()


if __name__ == "__main__":
    sys.exit(main())
