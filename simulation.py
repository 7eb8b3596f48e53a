# simulation.py
"""
Handles the core simulation logic and physics calculations.

This module defines the Firework entity and the Simulation class, which
is responsible for advancing the show by one tick: launching rockets at
random, lifting them towards their target altitude, exploding them, and
moving the resulting particles under gravity until they burn out.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import numpy as np
from numba import jit

from constants import DEFAULT_CONFIG, FIREWORK_COLORS, PARTICLE_GLYPHS
from particle import ParticleBurst

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params, width, height, on_explode=None):
#     - Inputs:
#       - params: Dictionary of simulation parameters (see
#         DEFAULT_CONFIG['simulation_parameters']). Missing keys fall back
#         to the defaults.
#       - width, height: int, size of the playing field in cells.
#       - on_explode: Optional callable invoked once per explosion.
#     - Side Effects: Creates a dedicated RNG from params['seed'].
#
#   - spawn(self) -> Optional[Firework]:
#     - Side Effects: May append one Firework to self.fireworks.
#     - Invariants: len(self.fireworks) <= max_fireworks afterwards.
#
#   - tick(self) -> None:
#     - Side Effects: Advances every active firework by one tick and drops
#       the ones whose particles are all gone.
#     - Invariants: No particle with lifetime <= 0 or y >= height remains.
#
#   - explode(self, fw: Firework) -> None:
#     - Side Effects: Fills fw.burst, sets fw.exploded, calls on_explode.
#
#   Construction also compiles _advance_particles_numba once, on an empty
#   burst, so no frame waits on the JIT.


@jit(nopython=True)
def _advance_particles_numba(positions, velocities, lifetimes, gravity, height):
    """
    Numba-jitted function to move every particle of a burst by one tick.

    Returns a boolean array marking the particles that are still alive.
    """
    particle_count = positions.shape[0]
    alive = np.empty(particle_count, dtype=np.bool_)
    for i in range(particle_count):
        positions[i, 0] += velocities[i, 0]
        positions[i, 1] += velocities[i, 1]
        velocities[i, 1] += gravity
        lifetimes[i] -= 1
        alive[i] = lifetimes[i] > 0 and positions[i, 1] < height
    return alive


@dataclass(eq=False)
class Firework:
    """A rising rocket that turns into an explosion of particles."""
    x: int
    y: int
    target_y: int
    color: str
    exploded: bool = False
    burst: ParticleBurst = field(default_factory=ParticleBurst.empty)

    @property
    def particles(self):
        return self.burst.particles


class Simulation:
    """
    Owns the active fireworks and advances them one tick at a time.
    """
    def __init__(
        self,
        params: Dict[str, Any],
        width: int,
        height: int,
        on_explode: Optional[Callable[[], None]] = None,
    ):
        """
        Initializes the simulation.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
            width (int): Width of the playing field.
            height (int): Height of the playing field.
            on_explode (Optional[Callable]): Called once for every explosion.
        """
        settings = dict(DEFAULT_CONFIG['simulation_parameters'])
        settings.update(params or {})

        self.width = width
        self.height = height
        self.on_explode = on_explode
        self.fireworks: List[Firework] = []

        self.spawn_probability = float(settings['spawn_probability'])
        self.max_fireworks = int(settings['max_fireworks'])
        self.launch_margin = int(settings['launch_margin'])
        self.target_offset = int(settings['target_offset'])
        self.ascent_rate = int(settings['ascent_rate'])
        self.gravity = float(settings['gravity'])
        self.particle_count_base = int(settings['particle_count_base'])
        self.particle_count_spread = int(settings['particle_count_spread'])
        self.speed_min = float(settings['speed_min'])
        self.speed_max = float(settings['speed_max'])
        self.lifetime_min = int(settings['lifetime_min'])
        self.lifetime_max = int(settings['lifetime_max'])

        # Validate parameters on initialization.
        problems = []
        if width <= 0 or height <= 0:
            problems.append(f"field size must be positive, got {width}x{height}")
        if not 0.0 <= self.spawn_probability <= 1.0:
            problems.append(f"spawn_probability must be in [0, 1], got {self.spawn_probability}")
        if self.max_fireworks < 1:
            problems.append(f"max_fireworks must be at least 1, got {self.max_fireworks}")
        if self.particle_count_base < 1 or self.particle_count_spread < 1:
            problems.append("particle counts must be positive")
        if self.lifetime_min < 1 or self.lifetime_max <= self.lifetime_min:
            problems.append(
                f"lifetime range [{self.lifetime_min}, {self.lifetime_max}) is invalid"
            )
        if self.speed_max <= self.speed_min:
            problems.append(f"speed range [{self.speed_min}, {self.speed_max}) is invalid")
        if problems:
            msg = "Configuration error: " + "; ".join(problems) + "."
            logging.critical(msg)
            raise ValueError(msg)

        self.seed = settings['seed']
        self.rng = np.random.default_rng(self.seed)

        self.explosion_count = 0

        # Compile the particle kernel now rather than on the first explosion.
        self._advance_burst(ParticleBurst.empty())

        logging.info(
            f"Simulation initialized on a {width}x{height} field "
            f"(cap {self.max_fireworks} fireworks, spawn p={self.spawn_probability})."
        )

    @property
    def active_count(self) -> int:
        return len(self.fireworks)

    def _random_color(self) -> str:
        return FIREWORK_COLORS[int(self.rng.integers(len(FIREWORK_COLORS)))]

    def create_firework(self) -> Firework:
        """Builds a rocket on the bottom row at a random column and target altitude."""
        launch_span = max(1, self.width - 2 * self.launch_margin)
        x = int(self.rng.integers(launch_span)) + self.launch_margin
        target_y = int(np.floor(self.rng.random() * (self.height / 2))) + self.target_offset
        return Firework(
            x=x,
            y=self.height - 1,
            target_y=target_y,
            color=self._random_color(),
        )

    def spawn(self) -> Optional[Firework]:
        """
        Launches a new firework with a fixed per-tick probability.

        Nothing is launched while the active set is at capacity.
        """
        if self.rng.random() >= self.spawn_probability:
            return None
        if len(self.fireworks) >= self.max_fireworks:
            return None

        fw = self.create_firework()
        self.fireworks.append(fw)
        logging.debug(f"Launched firework at x={fw.x} towards y={fw.target_y}.")
        return fw

    def explode(self, fw: Firework) -> None:
        """
        Turns a rocket into a radial burst of particles.
        """
        if fw.exploded:
            return

        count = self.particle_count_base + int(self.rng.integers(self.particle_count_spread))
        speeds = self.speed_min + self.rng.random(count) * (self.speed_max - self.speed_min)
        lifetimes = self.rng.integers(self.lifetime_min, self.lifetime_max, size=count)
        glyphs = [PARTICLE_GLYPHS[i] for i in self.rng.integers(len(PARTICLE_GLYPHS), size=count)]

        fw.burst = ParticleBurst.radial(
            fw.x, fw.y, count,
            speeds=speeds, lifetimes=lifetimes, glyphs=glyphs, color=fw.color
        )
        fw.exploded = True
        self.explosion_count += 1

        logging.debug(f"Firework exploded at ({fw.x}, {fw.y}) into {count} particles.")
        if self.on_explode is not None:
            self.on_explode()

    def _advance_burst(self, burst: ParticleBurst) -> None:
        alive = _advance_particles_numba(
            burst.positions, burst.velocities, burst.lifetimes,
            self.gravity, float(self.height)
        )
        burst.retain(alive)

    def tick(self) -> None:
        """
        Advances every active firework by one tick.
        """
        retained = []
        for fw in self.fireworks:
            if not fw.exploded:
                fw.y -= self.ascent_rate
                # An overshoot still explodes on this tick.
                if fw.y <= fw.target_y:
                    self.explode(fw)
                retained.append(fw)
                continue

            self._advance_burst(fw.burst)
            if fw.burst:
                retained.append(fw)
        self.fireworks = retained

    def step(self) -> None:
        """
        Executes one simulation step: a launch decision followed by a tick.
        """
        self.spawn()
        self.tick()
