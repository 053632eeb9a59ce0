"""Visual reactions to simulation signals: particle bursts and screen shake."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

import pygame

from .config import BLOCK, HUD_HEIGHT, PARTICLE_DIRECTIONS, PARTICLE_LIFE

Particle = dict[str, float | pygame.Color]


@dataclass(slots=True)
class Shake:
    timer: float = 0.0
    duration: float = 0.0
    intensity: float = 0.0

    def start(self, intensity: float, duration: float) -> None:
        # A stronger shake replaces a weaker one still running.
        if intensity >= self.intensity or self.timer <= 0.0:
            self.intensity = intensity
            self.duration = duration
            self.timer = duration

    def update(self, dt: float) -> None:
        if self.timer <= 0.0 or dt <= 0:
            return
        self.timer = max(0.0, self.timer - dt)
        if self.timer <= 0.0:
            self.intensity = 0.0
            self.duration = 0.0

    def offset(self) -> tuple[int, int]:
        if self.timer <= 0.0 or self.duration <= 0.0:
            return (0, 0)
        strength = self.intensity * (self.timer / self.duration)
        return (
            int(random.uniform(-strength, strength)),
            int(random.uniform(-strength, strength)),
        )


def cell_to_px(cell: tuple[int, int]) -> tuple[int, int]:
    """Top-left pixel of a grid cell inside the play area."""
    return (cell[0] * BLOCK, HUD_HEIGHT + cell[1] * BLOCK)


def spawn_particles(
    particles: list[Particle],
    cell: tuple[int, int],
    color_choices: Sequence[pygame.Color],
    count: int = 22,
    strength: float = 1.0,
) -> None:
    """Emit a burst of chunky particles from the center of ``cell``."""

    px, py = cell_to_px(cell)
    cx = px + BLOCK / 2
    cy = py + BLOCK / 2

    for _ in range(count):
        dir_x, dir_y = random.choice(PARTICLE_DIRECTIONS)
        speed = random.uniform(60, 260) * strength
        size = random.uniform(3.0, 7.0)
        color = pygame.Color(random.choice(color_choices))
        particles.append(
            {
                "x": cx,
                "y": cy,
                "vx": dir_x * speed,
                "vy": dir_y * speed,
                "life": PARTICLE_LIFE,
                "size": size,
                "color": color,
            }
        )


def update_particles(particles: list[Particle], dt: float) -> list[Particle]:
    """Advance particle positions and trim dead ones."""

    if dt <= 0:
        return particles

    for particle in particles:
        particle["x"] += particle["vx"] * dt  # type: ignore[operator]
        particle["y"] += particle["vy"] * dt  # type: ignore[operator]
        particle["life"] = max(0.0, particle["life"] - dt)  # type: ignore[operator]
    return [p for p in particles if p["life"] > 0]  # type: ignore[operator]


def draw_particles(surface: pygame.Surface, particles: Iterable[Particle]) -> None:
    for particle in particles:
        life = float(particle["life"])  # type: ignore[arg-type]
        alpha = int(255 * (life / PARTICLE_LIFE))
        if alpha <= 0:
            continue

        base_color = pygame.Color(particle["color"])  # type: ignore[arg-type]
        color = pygame.Color(base_color.r, base_color.g, base_color.b, alpha)
        side = max(1, int(particle["size"]))  # type: ignore[call-overload]
        surf = pygame.Surface((side, side), pygame.SRCALPHA)
        pygame.draw.rect(
            surf, color, pygame.Rect(0, 0, side, side), border_radius=max(2, side // 3)
        )

        x = int(particle["x"]) - side // 2  # type: ignore[call-overload]
        y = int(particle["y"]) - side // 2  # type: ignore[call-overload]
        surface.blit(surf, (x, y))
