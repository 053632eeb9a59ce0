"""Centralized configuration, tuning constants and palettes for Shield Snake."""

from __future__ import annotations

import enum
import os
import sys
from dataclasses import dataclass
from pathlib import Path

import pygame


class ConfigError(ValueError):
    """Raised when a simulation is built from a malformed configuration."""


def _default_data_dir() -> Path:
    """Return a platform-appropriate user data directory for saves/logs."""

    if sys.platform.startswith("win"):
        base = Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return base / "shield-snake"


DATA_DIR = Path(os.getenv("SHIELD_SNAKE_DATA_DIR") or _default_data_dir())
HIGHSCORE_FILE = Path(
    os.getenv("SHIELD_SNAKE_HIGHSCORE_FILE") or DATA_DIR / "highscore.txt"
)
SKIN_FILE = Path(os.getenv("SHIELD_SNAKE_SKIN_FILE") or DATA_DIR / "skin.txt")
LOG_LEVEL: str = os.getenv("SHIELD_SNAKE_LOG_LEVEL", "WARNING")

# --- Board -------------------------------------------------------------

BOARD_COLS: int = 34  # ~16:9 feel (34x19)
BOARD_ROWS: int = 19
MIN_BOARD_CELLS: int = 4
START_LENGTH: int = 4

# --- Timing ------------------------------------------------------------

BASE_STEPS_PER_SECOND: int = 10
MIN_STEPS_PER_SECOND: int = 4
MAX_STEPS_PER_SECOND: int = 20
SLOW_STEPS_FLOOR: int = 5
SLOW_STEPS_PENALTY: int = 4
MAX_FRAME_MS: float = 50.0  # clamp for a backgrounded / stalled host

# --- Scoring & growth --------------------------------------------------

TARGET_POINTS: int = 10
TARGET_GROWTH: int = 2
POWERUP_POINTS: int = 12
OBSTACLE_SCORE_STEP: int = 50

# --- Spawning ----------------------------------------------------------

SPAWN_ATTEMPTS: int = 600
SPAWN_FALLBACK: tuple[int, int] = (1, 1)
OBSTACLE_SAFE_DISTANCE: int = 6
MAX_POWERUPS: int = 2
POWERUP_BOARD_MS: float = 9000.0

# --- Timed effects -----------------------------------------------------

EFFECT_DURATION_MS: float = 6500.0
SHIELD_HIT_PENALTY_MS: float = 2200.0
SHIELD_SELF_PENALTY_MS: float = 2500.0
AMPUTATE_MIN_LENGTH: int = 6
AMPUTATE_SEGMENTS: int = 2
MAGNET_RANGE: int = 9
MAGNET_PULL_CHANCE: float = 0.12


class Difficulty(str, enum.Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


OBSTACLE_COUNTS: dict[Difficulty, int] = {
    Difficulty.EASY: 10,
    Difficulty.NORMAL: 16,
    Difficulty.HARD: 22,
}
POWERUP_CHANCES: dict[Difficulty, float] = {
    Difficulty.EASY: 0.030,
    Difficulty.NORMAL: 0.022,
    Difficulty.HARD: 0.017,
}
THRESHOLD_OBSTACLES: dict[Difficulty, int] = {
    Difficulty.EASY: 1,
    Difficulty.NORMAL: 1,
    Difficulty.HARD: 2,
}


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Options recognised by ``SimulationCore.reset``.

    The grid size is fixed for the lifetime of a core; everything else may
    be swapped in with ``SimulationCore.update_settings``.
    """

    difficulty: Difficulty = Difficulty.NORMAL
    obstacles_enabled: bool = True
    powerups_enabled: bool = True
    base_steps_per_second: float = float(BASE_STEPS_PER_SECOND)
    cols: int = BOARD_COLS
    rows: int = BOARD_ROWS
    seed: int | None = None

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        except ValueError as exc:
            raise ConfigError(f"unknown difficulty: {self.difficulty!r}") from exc
        if not isinstance(self.cols, int) or not isinstance(self.rows, int):
            raise ConfigError(
                f"grid dimensions must be integers, got {self.cols!r}x{self.rows!r}"
            )
        if self.cols < MIN_BOARD_CELLS or self.rows < MIN_BOARD_CELLS:
            raise ConfigError(
                f"grid must be at least {MIN_BOARD_CELLS}x{MIN_BOARD_CELLS} cells,"
                f" got {self.cols}x{self.rows}"
            )
        if self.base_steps_per_second <= 0:
            raise ConfigError(
                "base_steps_per_second must be positive,"
                f" got {self.base_steps_per_second!r}"
            )


# --- Host (pygame front end) -------------------------------------------

BLOCK: int = 20
HUD_HEIGHT: int = 36
FONT_NAME: str = "consolas"
FONT_SIZE: int = 20
FPS: int = 120
PARTICLE_LIFE: float = 0.45

PARTICLE_DIRECTIONS = [
    (1.0, 0.0),
    (-1.0, 0.0),
    (0.0, 1.0),
    (0.0, -1.0),
    (0.7, 0.7),
    (-0.7, 0.7),
    (0.7, -0.7),
    (-0.7, -0.7),
]

KEY_TO_VECTOR: dict[int, tuple[int, int]] = {
    pygame.K_UP: (0, -1),
    pygame.K_w: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_s: (0, 1),
    pygame.K_LEFT: (-1, 0),
    pygame.K_a: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_d: (1, 0),
}
KEY_TO_DIFFICULTY: dict[int, Difficulty] = {
    pygame.K_1: Difficulty.EASY,
    pygame.K_2: Difficulty.NORMAL,
    pygame.K_3: Difficulty.HARD,
}

PALETTE = {
    "bg_top": pygame.Color(11, 16, 32),
    "bg_bottom": pygame.Color(7, 9, 18),
    "grid": pygame.Color(24, 30, 48),
    "apple": pygame.Color(255, 93, 108),
    "apple_glow": pygame.Color(255, 93, 108, 90),
    "obstacle": pygame.Color(58, 64, 84),
    "text": pygame.Color(232, 238, 252),
    "hud": pygame.Color(10, 10, 10, 150),
    "bounce": pygame.Color(232, 238, 252),
}

POWERUP_COLORS = {
    "shield": pygame.Color(124, 244, 197),
    "slow": pygame.Color(120, 170, 255),
    "magnet": pygame.Color(255, 208, 0),
}

SKINS: dict[str, list[pygame.Color]] = {
    "neon": [
        pygame.Color(57, 255, 233),
        pygame.Color(127, 255, 212),
        pygame.Color(0, 230, 255),
        pygame.Color(178, 255, 255),
    ],
    "lava": [
        pygame.Color(255, 120, 60),
        pygame.Color(255, 170, 80),
        pygame.Color(230, 80, 40),
    ],
    "mono": [
        pygame.Color(232, 238, 252),
        pygame.Color(180, 188, 204),
    ],
}
DEFAULT_SKIN: str = "neon"
