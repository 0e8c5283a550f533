#!/usr/bin/env python3
"""
Solar System Simulator application entry point and UI/renderer coordination.

What this module does
- Opens a Pygame viewport (top-down view of the ecliptic plane) and a Dear PyGui
  control panel, and drives both from a single loop on the main thread.
- Owns one simcore.simulation.Simulation; every frame it ticks the pilot
  controls, advances the physics by one frame of fixed sub-steps, and draws.

Single-threaded model
- The viewport and the control panel are pumped alternately from the same loop,
  so the registry is never mutated while a physics step is running. UI callbacks
  (spawn, pilot mode, reset, preset) run between frames.

Controls (viewport)
- Wheel: zoom | Right/Middle-drag or arrows: pan | Space: pause/play | R: reset
- +/-: time scale | Tab: cycle camera target | 1/2/3: classic/realistic/compact
- N then left-drag: spawn an asteroid (drag sets the launch velocity)
- P then left-click: place the spaceship | W/S: thrust | mouse: steer | Esc: leave pilot mode

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python solar_sim.py --preset classic`
"""

import argparse
import math
import sys
import time
from typing import List, Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from simcore import constants as C
from simcore.camera import Camera2D
from simcore.config import SimulationConfig
from simcore.exceptions import NumericalInstabilityError, SolarSimError
from simcore.log import configure_logging, get_logger
from simcore.physics import kinetic_energy, potential_energy
from simcore.presets import DEFAULT_PRESET, PRESETS, preset_config
from simcore.simulation import Simulation
from simcore.vector_utils import clamp, vec_len

logger = get_logger("app")

FREE_CAMERA = "Free"
PRESET_KEYS = {pygame.K_1: "classic", pygame.K_2: "realistic", pygame.K_3: "compact"}
TIME_SCALE_STEP = 1.25

# ============================================================
# Pygame Renderer
# ============================================================


class PygameRenderer:
    """
    Pygame viewport: draws bodies, trails, spawn preview and the pilot HUD.
    Handles zoom/pan, spawn drags, ship placement, thrust keys and steering.
    """

    def __init__(self, sim: Simulation):
        self.sim = sim
        self.camera = Camera2D(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.running = True

        self.camera_target = FREE_CAMERA
        self.spawn_mode = False
        self.spawn_start: Optional[Tuple[float, float, float]] = None
        self.spawn_mass = C.SPAWN_DEFAULT_MASS
        self.spawn_speed_multiplier = 1.0
        self.placing_ship = False
        self.max_thrust = C.DEFAULT_MAX_THRUST

        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.status = ""

    def open(self):
        pygame.init()
        pygame.display.set_caption("Solar System Simulator - Viewport")
        self.surface = pygame.display.set_mode((C.VIEW_WIDTH, C.VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(C.VIEW_WIDTH, C.VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

    def close(self):
        pygame.quit()

    def auto_frame_camera(self):
        """Adjust camera to fit all bodies into view with margin."""
        bodies = self.sim.registry.snapshot()
        if not bodies:
            self.camera.center = [0.0, 0.0]
            self.camera.upp = C.DEFAULT_UNITS_PER_PIXEL
            return
        self.camera.center = [0.0, 0.0]
        extent = max(max(abs(b.position[0]), abs(b.position[2])) + b.radius for b in bodies)
        self.camera.fit_radius(extent)

    def cycle_camera_target(self):
        names = [FREE_CAMERA] + self.sim.registry.names()
        try:
            idx = names.index(self.camera_target)
        except ValueError:
            idx = 0
        self.camera_target = names[(idx + 1) % len(names)]

    def frame(self, real_dt: float):
        """One viewport frame: input, pilot tick, physics, camera, draw."""
        self.handle_events(real_dt)

        keys = pygame.key.get_pressed()
        self.sim.update_pilot_controls(bool(keys[pygame.K_w]), bool(keys[pygame.K_s]))

        try:
            self.sim.advance_frame()
        except NumericalInstabilityError as e:
            logger.error("Simulation diverged; resetting", extra={"body": e.body_name})
            self._leave_pilot_mode()
            self.sim.reset()
            self.status = f"Diverged on {e.body_name}; simulation reset"

        self.update_camera()
        self.draw()
        self.clock.tick(60)

    def update_camera(self):
        ship = self.sim.spaceship
        if ship is not None:
            self.camera.follow(ship.position)
            return
        if self.camera_target == FREE_CAMERA:
            return
        target = self.sim.find_body(self.camera_target)
        if target is None:
            self.camera_target = FREE_CAMERA
            return
        self.camera.follow(target.position)

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    world = self.camera.screen_to_world(event.pos)
                    if self.placing_ship:
                        self.place_ship(world)
                    elif self.spawn_mode:
                        self.spawn_start = world
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = event.pos

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1 and self.spawn_start is not None:
                    self.finish_spawn(self.camera.screen_to_world(event.pos))
                if event.button in (2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.sim.pilot_mode:
                    dx, dy = event.rel
                    self.sim.steer(dx, dy)
                elif self.dragging_background:
                    dx = event.pos[0] - self.drag_start_screen[0]
                    dy = event.pos[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = event.pos

    def handle_key(self, key):
        if key == pygame.K_SPACE:
            self.sim.playing = not self.sim.playing
        elif key == pygame.K_r:
            self.reset()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.sim.set_time_scale(max(self.sim.time_scale, 0.1) * TIME_SCALE_STEP)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.sim.set_time_scale(self.sim.time_scale / TIME_SCALE_STEP)
        elif key == pygame.K_TAB:
            self.cycle_camera_target()
        elif key in PRESET_KEYS:
            self.load_preset(PRESET_KEYS[key])
        elif key == pygame.K_n:
            self.spawn_mode = not self.spawn_mode
            self.spawn_start = None
        elif key == pygame.K_p:
            self.toggle_pilot_mode()
        elif key == pygame.K_ESCAPE and self.sim.pilot_mode:
            self._leave_pilot_mode()

    # -----------------------
    # Commands
    # -----------------------

    def finish_spawn(self, end_world):
        start = self.spawn_start
        self.spawn_start = None
        self.spawn_mode = False
        try:
            body = self.sim.spawn_body(start, end_world,
                                       mass=self.spawn_mass,
                                       speed_multiplier=self.spawn_speed_multiplier,
                                       color=_spawn_color(len(self.sim.registry)))
            self.status = f"Spawned {body.name}"
        except SolarSimError as e:
            logger.warning("Spawn rejected", extra={"error": str(e)})
            self.status = e.message

    def toggle_pilot_mode(self):
        if self.sim.pilot_mode or self.placing_ship:
            self._leave_pilot_mode()
        else:
            self.placing_ship = True
            self.status = "Click on space to place the ship"

    def place_ship(self, world):
        self.placing_ship = False
        try:
            self.sim.enter_pilot_mode(world, max_thrust=self.max_thrust)
        except SolarSimError as e:
            logger.warning("Could not enter pilot mode", extra={"error": str(e)})
            self.status = e.message
            return
        pygame.event.set_grab(True)
        pygame.mouse.set_visible(False)
        self.status = "Pilot mode: W/S thrust, mouse to steer, Esc to exit"

    def _leave_pilot_mode(self):
        self.placing_ship = False
        if self.sim.pilot_mode:
            self.sim.exit_pilot_mode()
        pygame.event.set_grab(False)
        pygame.mouse.set_visible(True)

    def reset(self):
        self._leave_pilot_mode()
        self.sim.reset()
        self.camera_target = FREE_CAMERA
        self.auto_frame_camera()
        self.status = "Simulation reset"

    def load_preset(self, name: str):
        self._leave_pilot_mode()
        config = SimulationConfig.from_env(base=preset_config(name))
        self.sim.load_preset(name, config=config.replace(time_scale=self.sim.time_scale))
        self.camera_target = FREE_CAMERA
        self.auto_frame_camera()
        self.status = f"Loaded preset: {name}"

    # -----------------------
    # Drawing
    # -----------------------

    def draw(self):
        surf = self.surface
        surf.fill(C.BACKGROUND_COLOR)
        bodies = self.sim.registry.snapshot()

        # Trails
        for b in bodies:
            if len(b.trail) > 1:
                pts = [p for p in (_safe_point(self.camera.world_to_screen(t)) for t in b.trail) if p]
                if len(pts) > 1:
                    pygame.draw.aalines(surf, b.color, False, pts)

        # Bodies
        for b in bodies:
            sp = _safe_point(self.camera.world_to_screen(b.position))
            if sp is None:
                continue
            vis_r = int(clamp(b.radius / self.camera.upp, 2, 50))
            gfxdraw.filled_circle(surf, sp[0], sp[1], vis_r, b.color)
            gfxdraw.aacircle(surf, sp[0], sp[1], vis_r, (0, 0, 0))
            if b.pilot is not None:
                self.draw_heading(surf, sp, b.pilot.forward)

        # Spawn drag preview
        if self.spawn_start is not None:
            start_s = _safe_point(self.camera.world_to_screen(self.spawn_start))
            end_s = _safe_point(pygame.mouse.get_pos())
            if start_s and end_s:
                pygame.draw.line(surf, C.SPAWN_LINE_COLOR, start_s, end_s, 2)

        self.draw_hud(surf)
        pygame.display.flip()

    def draw_heading(self, surf, screen_pos, forward):
        """Arrow showing the projection of the ship's forward vector."""
        length = 20
        tip = (screen_pos[0] + forward[0] * length, screen_pos[1] + forward[2] * length)
        tip_s = _safe_point(tip)
        if tip_s:
            pygame.draw.line(surf, C.HUD_COLOR, screen_pos, tip_s, 2)

    def draw_hud(self, surf):
        ts = self.sim.time_scale
        state = "Playing" if self.sim.playing else "Paused"
        draw_text(surf, "Wheel: zoom | Right-drag: pan | N: spawn | P: pilot | R: reset | Tab: target | 1/2/3: preset",
                  10, 10, C.HUD_COLOR)
        draw_text(surf, f"Preset: {self.sim.preset_name}  Time scale: {ts:.2f}x  [{state}]  "
                        f"Bodies: {len(self.sim.registry)}  Target: {self.camera_target}", 10, 30, C.HUD_COLOR)
        bodies = self.sim.registry.snapshot()
        energy = kinetic_energy(bodies) + potential_energy(bodies, self.sim.config.gravitational_constant)
        draw_text(surf, f"t = {self.sim.elapsed_time:.1f}  E = {energy:.4g}", 10, 70, C.HUD_COLOR)
        ship = self.sim.spaceship
        if ship is not None:
            pilot = ship.pilot
            percent = pilot.current_thrust / pilot.max_thrust * 100
            draw_text(surf, f"Thrust: {pilot.current_thrust:.1f} ({percent:.0f}%)  "
                            f"Speed: {vec_len(ship.velocity):.1f}  "
                            f"{self.sim.speed_fraction_of_light():.5f}c", 10, 50, C.HUD_COLOR)
        if self.status:
            draw_text(surf, self.status, 10, self.camera.viewport_size[1] - 24, C.HUD_COLOR)


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = pt[0], pt[1]
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    x, y = int(x), int(y)
    if -C.SAFE_COORD_LIMIT <= x <= C.SAFE_COORD_LIMIT and -C.SAFE_COORD_LIMIT <= y <= C.SAFE_COORD_LIMIT:
        return (x, y)
    return None


def _spawn_color(seed: int) -> Tuple[int, int, int]:
    """Deterministic bright color per spawned body."""
    hue = (seed * 0.61803398875) % 1.0
    c = pygame.Color(0)
    c.hsva = (hue * 360, 70, 100, 100)
    return (c.r, c.g, c.b)

# ============================================================
# Dear PyGui UI
# ============================================================


class UI:
    """
    Dear PyGui control panel: presets, time scale, spawn and pilot parameters,
    camera target and live pilot readouts.
    """

    def __init__(self, sim: Simulation, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.time_scale_id = None
        self.target_combo_id = None
        self.pilot_info_id = None
        self._known_names: List[str] = []
        self._build_ui()

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Solar System Simulator - Controls', width=420, height=520)

        with dpg.window(label="Controls", width=400, height=500, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                dpg.add_combo(list(PRESETS), default_value=self.sim.preset_name or DEFAULT_PRESET,
                              width=140, tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self._load_preset(dpg.get_value("preset_combo")))
                dpg.add_button(label="Reset", callback=self._reset)

            dpg.add_separator()
            dpg.add_text("Simulation")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Auto-fit Camera", callback=self.renderer.auto_frame_camera)
            self.time_scale_id = dpg.add_slider_float(label="Time scale", min_value=0.0,
                                                      max_value=C.MAX_TIME_SCALE,
                                                      default_value=self.sim.time_scale, width=220,
                                                      callback=lambda s, a, u: self._set_time_scale(a))
            self.target_combo_id = dpg.add_combo([FREE_CAMERA], default_value=FREE_CAMERA, label="Camera target",
                                                 width=160, callback=lambda s, a, u: self._set_target(a))

            dpg.add_separator()
            dpg.add_text("Spawn (click & drag in the viewport)")
            dpg.add_input_float(label="Mass", default_value=self.renderer.spawn_mass, width=120,
                                callback=lambda s, a, u: setattr(self.renderer, "spawn_mass", a))
            dpg.add_input_float(label="Velocity x", default_value=self.renderer.spawn_speed_multiplier, width=120,
                                callback=lambda s, a, u: setattr(self.renderer, "spawn_speed_multiplier", a))
            dpg.add_button(label="Spawn Mode", callback=self._arm_spawn)

            dpg.add_separator()
            dpg.add_text("Pilot")
            dpg.add_input_float(label="Max thrust", default_value=self.renderer.max_thrust, width=120,
                                callback=lambda s, a, u: setattr(self.renderer, "max_thrust", a))
            dpg.add_button(label="Launch / Exit Pilot Mode", callback=self.renderer.toggle_pilot_mode)
            self.pilot_info_id = dpg.add_text("")

            dpg.add_separator()
            self.status_msg_id = dpg.add_text("", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _load_preset(self, name: str):
        try:
            self.renderer.load_preset(name)
        except SolarSimError as e:
            logger.warning("Preset load failed", extra={"error": str(e)})
            self._set_error(e.message)
            return
        self._set_status(f"Loaded preset: {name}")

    def _reset(self):
        self.renderer.reset()
        dpg.set_value(self.time_scale_id, self.sim.time_scale)
        self._set_status("Simulation reset")

    def _toggle_play(self):
        self.sim.playing = not self.sim.playing

    def _set_time_scale(self, value):
        try:
            self.sim.set_time_scale(float(value))
        except SolarSimError as e:
            self._set_error(e.message)

    def _set_target(self, name):
        self.renderer.camera_target = name

    def _arm_spawn(self):
        self.renderer.spawn_mode = True
        self._set_status("Spawn armed: drag in the viewport")

    def sync(self):
        """Refresh widgets that mirror simulation state."""
        names = [FREE_CAMERA] + self.sim.registry.names()
        if names != self._known_names:
            dpg.configure_item(self.target_combo_id, items=names)
            self._known_names = names
        dpg.set_value(self.target_combo_id, self.renderer.camera_target)
        dpg.set_value(self.time_scale_id, self.sim.time_scale)

        ship = self.sim.spaceship
        if ship is None:
            dpg.set_value(self.pilot_info_id, "Not piloting")
        else:
            dpg.set_value(self.pilot_info_id,
                          f"Thrust {ship.pilot.current_thrust:.1f} / {ship.pilot.max_thrust:.1f}   "
                          f"{self.sim.speed_fraction_of_light():.5f}c")
        if self.renderer.status:
            self._set_status(self.renderer.status)
            self.renderer.status = ""

# ============================================================
# Application Entry
# ============================================================


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Real-time N-body solar system simulator")
    parser.add_argument("--preset", choices=sorted(PRESETS), default=DEFAULT_PRESET)
    parser.add_argument("--seed", type=int, default=None, help="seed for randomized start angles")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level, json_format=args.json_logs)

    try:
        config = SimulationConfig.from_env(base=preset_config(args.preset))
    except SolarSimError as e:
        logger.error("Invalid configuration", extra={"error": str(e)})
        return 2

    sim = Simulation(config=config, preset=args.preset, seed=args.seed)
    renderer = PygameRenderer(sim)
    renderer.open()
    ui = UI(sim, renderer)

    last_time = time.perf_counter()
    try:
        while renderer.running and dpg.is_dearpygui_running():
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            renderer.frame(real_dt)
            ui.sync()
            dpg.render_dearpygui_frame()
    finally:
        renderer.close()
        dpg.destroy_context()
    return 0


if __name__ == "__main__":
    sys.exit(main())
