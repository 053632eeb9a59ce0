"""Pygame host for Shield Snake: window, keyboard intake, fixed-step driving
of the simulation core, and render/audio reactions to its signals."""

from __future__ import annotations

import dataclasses
import logging

import pygame

from .audio import AudioEngine
from .collision import BounceSeverity
from .config import (
    BLOCK,
    FONT_NAME,
    FONT_SIZE,
    FPS,
    HUD_HEIGHT,
    KEY_TO_DIFFICULTY,
    KEY_TO_VECTOR,
    LOG_LEVEL,
    MAX_STEPS_PER_SECOND,
    MIN_STEPS_PER_SECOND,
    PALETTE,
    POWERUP_BOARD_MS,
    POWERUP_COLORS,
    SKINS,
    SimulationConfig,
)
from .core import Phase, SimulationCore, SimulationSnapshot
from .effects import Shake, cell_to_px, draw_particles, spawn_particles, update_particles
from .events import (
    Amputated,
    GameOver,
    PowerupStarted,
    ShieldBounce,
    SimulationEvent,
    TargetConsumed,
)
from .grid import board_for_aspect
from .powerups import EffectKind
from .storage import ScoreStore

logger = logging.getLogger(__name__)


class ShieldSnakeApp:
    """Owns the window and forwards input/time to a ``SimulationCore``."""

    def __init__(
        self, config: SimulationConfig | None = None, store: ScoreStore | None = None
    ) -> None:
        pygame.init()
        if config is None:
            config = SimulationConfig()
            info = pygame.display.Info()
            # Info reports -1 when the driver cannot tell the desktop size.
            if info.current_w > 0 and info.current_h > 0:
                cols, rows = board_for_aspect(info.current_w, info.current_h)
                config = SimulationConfig(cols=cols, rows=rows)
        self.core = SimulationCore(config, queue_events=False)
        self.width = self.core.world.cols * BLOCK
        self.height = HUD_HEIGHT + self.core.world.rows * BLOCK

        self._base_window_flags = pygame.DOUBLEBUF | pygame.SCALED
        self.fullscreen = False
        self.window = pygame.display.set_mode(
            (self.width, self.height), self._base_window_flags
        )
        pygame.display.set_caption("Shield Snake")
        self.scene = pygame.Surface((self.width, self.height)).convert_alpha()
        self.background = self._build_background()
        self.font = pygame.font.SysFont(FONT_NAME, FONT_SIZE)
        self.audio = AudioEngine()

        self.store = store or ScoreStore()
        self.high_score = self.store.load_best()
        self.skin = self.store.load_skin()

        self.particles: list = []
        self.shake = Shake()
        self.core.subscribe(self._on_event)

    # --- Settings ------------------------------------------------------

    def _apply_settings(self, **changes: object) -> None:
        config = dataclasses.replace(self.core.config, **changes)
        self.core.update_settings(config)

    def _change_speed(self, delta: int) -> None:
        rate = self.core.config.base_steps_per_second + delta
        rate = max(MIN_STEPS_PER_SECOND, min(MAX_STEPS_PER_SECOND, rate))
        self._apply_settings(base_steps_per_second=float(rate))

    def _cycle_skin(self) -> None:
        names = list(SKINS)
        self.skin = names[(names.index(self.skin) + 1) % len(names)]
        self.store.save_skin(self.skin)

    def _apply_display_mode(self) -> None:
        flags = self._base_window_flags
        if self.fullscreen:
            flags |= pygame.FULLSCREEN
        self.window = pygame.display.set_mode((self.width, self.height), flags)

    # --- Signals -------------------------------------------------------

    def _on_event(self, event: SimulationEvent) -> None:
        """Turn simulation signals into particles, shake and sound."""
        head = self.core.state.snake.head
        if isinstance(event, TargetConsumed):
            spawn_particles(self.particles, event.cell, [PALETTE["apple"]], count=34)
            self.audio.play("eat")
        elif isinstance(event, PowerupStarted):
            spawn_particles(
                self.particles, head, [POWERUP_COLORS[event.kind.value]], count=24
            )
            self.audio.play("powerup")
        elif isinstance(event, ShieldBounce):
            self.shake.start(float(event.severity), 0.25)
            spawn_particles(
                self.particles, event.at, [PALETTE["bounce"]], count=14, strength=0.9
            )
            if event.shield_left <= 0:
                # the hit burned the last of the shield
                spawn_particles(
                    self.particles, event.at, [POWERUP_COLORS["shield"]], count=18
                )
            if event.severity is BounceSeverity.STRONG:
                self.audio.play("bounce_hard")
            else:
                self.audio.play("bounce")
        elif isinstance(event, Amputated):
            for cell in event.removed:
                spawn_particles(
                    self.particles, cell, SKINS[self.skin], count=8, strength=0.6
                )
        elif isinstance(event, GameOver):
            self.high_score = self.store.record(event.score)
            self.shake.start(8.0, 0.6)
            self.audio.play("over")

    # --- Input ---------------------------------------------------------

    def handle_events(self) -> bool:
        """Handle window/keyboard events and translate them into intents."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type != pygame.KEYDOWN:
                continue
            key = event.key
            phase = self.core.phase

            if key == pygame.K_ESCAPE:
                return False
            if key in (pygame.K_f, pygame.K_F11):
                self.fullscreen = not self.fullscreen
                self._apply_display_mode()
                continue
            if key == pygame.K_k:
                self._cycle_skin()
                continue

            if phase is Phase.MENU:
                if key in (pygame.K_RETURN, pygame.K_SPACE):
                    self.core.start()
                    self.audio.play("start")
                elif key in KEY_TO_DIFFICULTY:
                    self._apply_settings(difficulty=KEY_TO_DIFFICULTY[key])
                elif key == pygame.K_o:
                    self._apply_settings(
                        obstacles_enabled=not self.core.config.obstacles_enabled
                    )
                elif key == pygame.K_p:
                    self._apply_settings(
                        powerups_enabled=not self.core.config.powerups_enabled
                    )
                elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._change_speed(1)
                elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self._change_speed(-1)
                continue

            if phase is Phase.GAME_OVER:
                if key == pygame.K_r:
                    self.core.reset()
                    self.audio.play("start")
                elif key == pygame.K_m:
                    self.core.reset(phase=Phase.MENU)
                elif key == pygame.K_q:
                    return False
                continue

            if key == pygame.K_SPACE:
                self.core.toggle_pause()
                continue
            if phase is Phase.PAUSED:
                continue

            vector = KEY_TO_VECTOR.get(key)
            if vector is not None:
                before = self.core.state.pending_direction
                if self.core.queue_direction(*vector) and before.value != vector:
                    self.audio.play("turn")
        return True

    # --- Draw ----------------------------------------------------------

    def _build_background(self) -> pygame.Surface:
        """Gradient play field with grid lines, built once."""
        surface = pygame.Surface((self.width, self.height))
        top, bottom = PALETTE["bg_top"], PALETTE["bg_bottom"]
        for y in range(self.height):
            t = y / self.height
            color = (
                int(top.r + (bottom.r - top.r) * t),
                int(top.g + (bottom.g - top.g) * t),
                int(top.b + (bottom.b - top.b) * t),
            )
            pygame.draw.line(surface, color, (0, y), (self.width, y))
        for x in range(0, self.width + 1, BLOCK):
            pygame.draw.line(surface, PALETTE["grid"], (x, HUD_HEIGHT), (x, self.height))
        for y in range(HUD_HEIGHT, self.height + 1, BLOCK):
            pygame.draw.line(surface, PALETTE["grid"], (0, y), (self.width, y))
        return surface

    def _cell_rect(self, cell: tuple[int, int], inset: int = 1) -> pygame.Rect:
        x, y = cell_to_px(cell)
        return pygame.Rect(x + inset, y + inset, BLOCK - inset * 2, BLOCK - inset * 2)

    def _draw_board(self, snap: SimulationSnapshot) -> None:
        for cell in snap.obstacles:
            pygame.draw.rect(
                self.scene, PALETTE["obstacle"], self._cell_rect(cell), border_radius=3
            )

        if snap.target is not None:
            rect = self._cell_rect(snap.target)
            pygame.draw.circle(
                self.scene, PALETTE["apple_glow"], rect.center, BLOCK // 2 + 3
            )
            pygame.draw.circle(self.scene, PALETTE["apple"], rect.center, BLOCK // 2 - 2)

        for powerup in snap.powerups:
            color = pygame.Color(POWERUP_COLORS[powerup.kind.value])
            # Fade out over the last third of the on-board lifetime.
            fade = 3 * powerup.remaining_on_board_ms / POWERUP_BOARD_MS
            color.a = int(255 * min(1.0, fade))
            rect = self._cell_rect(powerup.cell, inset=3)
            pygame.draw.rect(self.scene, color, rect, width=2, border_radius=5)
            label = self.font.render(powerup.kind.value[0].upper(), True, color)
            self.scene.blit(label, label.get_rect(center=rect.center))

        colors = SKINS[self.skin]
        for idx, cell in enumerate(snap.snake):
            pygame.draw.rect(
                self.scene,
                colors[idx % len(colors)],
                self._cell_rect(cell),
                border_radius=4,
            )
        if snap.effect_remaining(EffectKind.SHIELD) > 0:
            pygame.draw.rect(
                self.scene,
                POWERUP_COLORS["shield"],
                self._cell_rect(snap.head, inset=-2),
                width=2,
                border_radius=6,
            )

    def _draw_hud(self, snap: SimulationSnapshot) -> None:
        hud = pygame.Surface((self.width, HUD_HEIGHT), pygame.SRCALPHA)
        hud.fill(PALETTE["hud"])
        self.scene.blit(hud, (0, 0))

        parts = [f"Score {snap.score}", f"Best {max(self.high_score, snap.score)}"]
        for kind, left in snap.effects:
            if left > 0:
                parts.append(f"{kind.value} {left / 1000:.1f}s")
        config = self.core.config
        parts.append(f"{config.difficulty.value} {snap.steps_per_second:g}/s")
        text = self.font.render("   ".join(parts), True, PALETTE["text"])
        self.scene.blit(text, (10, (HUD_HEIGHT - text.get_height()) // 2))

    def _draw_overlay(self, lines: list[str]) -> None:
        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        self.scene.blit(overlay, (0, 0))
        total = len(lines) * (FONT_SIZE + 8)
        y = (self.height - total) // 2
        for line in lines:
            text = self.font.render(line, True, PALETTE["text"])
            self.scene.blit(text, text.get_rect(midtop=(self.width // 2, y)))
            y += FONT_SIZE + 8

    def draw(self, snap: SimulationSnapshot) -> None:
        self.scene.blit(self.background, (0, 0))
        self._draw_board(snap)
        draw_particles(self.scene, self.particles)
        self._draw_hud(snap)

        config = self.core.config
        if snap.phase is Phase.MENU:
            self._draw_overlay(
                [
                    "Shield Snake",
                    "ENTER to play",
                    f"1/2/3 difficulty: {config.difficulty.value}",
                    f"O obstacles: {'on' if config.obstacles_enabled else 'off'}"
                    f"   P power-ups: {'on' if config.powerups_enabled else 'off'}",
                    f"+/- speed: {config.base_steps_per_second:g}   K skin: {self.skin}",
                ]
            )
        elif snap.phase is Phase.PAUSED:
            self._draw_overlay(["Paused", "Press SPACE to resume"])
        elif snap.phase is Phase.GAME_OVER:
            reason = snap.game_over_reason.value if snap.game_over_reason else "?"
            self._draw_overlay(
                [
                    f"Game Over ({reason})",
                    f"Score: {snap.score}",
                    f"Best:  {self.high_score}",
                    "R restart / M menu / Q quit",
                ]
            )

        ox, oy = self.shake.offset()
        self.window.fill((0, 0, 0))
        self.window.blit(self.scene, (ox, oy))

    # --- Main loop -----------------------------------------------------

    def start(self) -> None:
        """Run the main loop: handle events, advance the core, then render."""
        clock = pygame.time.Clock()
        running = True

        while running:
            dt_ms = clock.tick(FPS)
            running = self.handle_events()

            snap = self.core.advance(dt_ms)

            dt = dt_ms / 1000.0
            self.particles = update_particles(self.particles, dt)
            self.shake.update(dt)

            self.draw(snap)
            pygame.display.update()

        logger.info("quitting with best score %d", self.high_score)
        pygame.quit()


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    game = ShieldSnakeApp()
    game.start()
