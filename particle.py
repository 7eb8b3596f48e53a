# particle.py
"""
Manages the state of explosion particles.

This module defines the ParticleBurst class, which stores every fragment
of a single firework explosion (position, velocity, lifetime, glyph) in
NumPy arrays, and the Particle record used to look at one fragment.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

# --- Data Contracts ---
#
# class ParticleBurst:
#   - __init__(self, positions, velocities, lifetimes, glyphs, color):
#     - Inputs:
#       - positions: array-like of shape (N, 2), (x, y) per particle.
#       - velocities: array-like of shape (N, 2), (vx, vy) per particle.
#       - lifetimes: array-like of shape (N,), remaining ticks.
#       - glyphs: sequence of N single-character strings.
#       - color: ANSI color code shared by the whole burst.
#     - Outputs: None
#     - Invariants:
#       - self.positions and self.velocities are float64 arrays of shape (N, 2).
#       - self.lifetimes is an int64 array of shape (N,).
#       - All arrays always have the same length N.
#
#   - retain(self, mask) -> None:
#     - Inputs: boolean array of shape (N,).
#     - Side Effects: Compacts every array to the rows where mask is True,
#       preserving their relative order.
#
#   - from_particles(particles, color=None) -> ParticleBurst and the
#     `particles` property (also exposed as Firework.particles):
#     - Record-level views for building and inspecting bursts one
#       particle at a time. The show itself works on the arrays.


@dataclass
class Particle:
    """A single explosion fragment."""
    x: float
    y: float
    vx: float
    vy: float
    glyph: str
    color: str
    lifetime: int


class ParticleBurst:
    """
    A container for the particles of one explosion, held in NumPy arrays.
    """
    def __init__(self, positions, velocities, lifetimes, glyphs: Sequence[str], color: str):
        self.positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        self.velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        self.lifetimes = np.array(lifetimes, dtype=np.int64).reshape(-1)
        self.glyphs = np.array(list(glyphs), dtype=str)
        self.color = color

        sizes = {
            len(self.positions), len(self.velocities),
            len(self.lifetimes), len(self.glyphs)
        }
        if len(sizes) != 1:
            msg = (
                f"ParticleBurst arrays disagree in length: positions={len(self.positions)}, "
                f"velocities={len(self.velocities)}, lifetimes={len(self.lifetimes)}, "
                f"glyphs={len(self.glyphs)}."
            )
            logging.critical(msg)
            raise ValueError(msg)

    @classmethod
    def empty(cls, color: Optional[str] = None) -> "ParticleBurst":
        """Returns a burst with no particles."""
        return cls(np.zeros((0, 2)), np.zeros((0, 2)), np.zeros(0), [], color)

    @classmethod
    def from_particles(cls, particles: List[Particle], color: Optional[str] = None) -> "ParticleBurst":
        """
        Packs individual Particle records into a burst.

        The burst color is taken from the first particle unless given.
        """
        if not particles:
            return cls.empty(color)
        return cls(
            positions=[(p.x, p.y) for p in particles],
            velocities=[(p.vx, p.vy) for p in particles],
            lifetimes=[p.lifetime for p in particles],
            glyphs=[p.glyph for p in particles],
            color=color if color is not None else particles[0].color,
        )

    @classmethod
    def radial(
        cls,
        x: float,
        y: float,
        count: int,
        speeds,
        lifetimes,
        glyphs: Sequence[str],
        color: str,
    ) -> "ParticleBurst":
        """
        Creates `count` particles at (x, y) flying out at evenly spaced angles.

        Particle i travels along angle 2*pi*i/count with speeds[i].
        """
        angles = 2.0 * np.pi * np.arange(count) / count
        speeds = np.asarray(speeds, dtype=np.float64)
        velocities = np.column_stack((np.cos(angles) * speeds, np.sin(angles) * speeds))
        positions = np.tile(np.array([x, y], dtype=np.float64), (count, 1))
        return cls(positions, velocities, lifetimes, glyphs, color)

    def __len__(self) -> int:
        return len(self.lifetimes)

    def __bool__(self) -> bool:
        return len(self) > 0

    def retain(self, mask) -> None:
        """Keeps only the particles selected by the boolean mask."""
        mask = np.asarray(mask, dtype=bool)
        self.positions = self.positions[mask]
        self.velocities = self.velocities[mask]
        self.lifetimes = self.lifetimes[mask]
        self.glyphs = self.glyphs[mask]

    @property
    def particles(self) -> List[Particle]:
        """The burst's particles as individual records, in storage order."""
        return [
            Particle(
                x=float(pos[0]), y=float(pos[1]),
                vx=float(vel[0]), vy=float(vel[1]),
                glyph=str(glyph), color=self.color, lifetime=int(life)
            )
            for pos, vel, life, glyph in zip(
                self.positions, self.velocities, self.lifetimes, self.glyphs
            )
        ]
