"""Procedural chiptune cues for simulation signals."""

from __future__ import annotations

import logging
import math
import random
from array import array
from dataclasses import dataclass
from typing import Dict, List, Tuple

import pygame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SynthPatch:
    freq: float
    duration_ms: int
    harmonics: Tuple[Tuple[float, float], ...] = ((1.0, 1.0),)
    sweep: float = 0.0
    noise: float = 0.0
    attack: float = 0.02
    decay: float = 0.15
    release: float = 0.2
    sustain_level: float = 0.6
    volume: float = 0.5
    waveform: str = "square"  # "sine", "square", "triangle"
    pulse_width: float = 0.5
    bitcrush_levels: int = 0
    mix_volume: float = 0.4


# Short blips modelled on the browser original: sine/triangle pickups,
# square thuds for shield hits and game over.
PATCHES: Dict[str, SynthPatch] = {
    "turn": SynthPatch(
        freq=340,
        duration_ms=60,
        sweep=-120,
        attack=0.001,
        decay=0.05,
        release=0.05,
        sustain_level=0.16,
        volume=0.6,
        pulse_width=0.24,
        bitcrush_levels=5,
        mix_volume=0.2,
    ),
    "start": SynthPatch(
        freq=640,
        duration_ms=50,
        waveform="triangle",
        attack=0.01,
        decay=0.2,
        release=0.4,
        sustain_level=0.4,
        mix_volume=0.3,
    ),
    "eat": SynthPatch(
        freq=880,
        duration_ms=90,
        harmonics=((1.0, 1.0), (0.75, 0.6)),
        sweep=-220,
        waveform="sine",
        attack=0.001,
        decay=0.09,
        release=0.3,
        sustain_level=0.3,
        volume=0.8,
        mix_volume=0.34,
    ),
    "powerup": SynthPatch(
        freq=740,
        duration_ms=120,
        harmonics=((1.0, 1.0), (1.32, 0.55)),
        sweep=240,
        waveform="triangle",
        attack=0.003,
        decay=0.2,
        release=0.4,
        sustain_level=0.48,
        volume=0.85,
        mix_volume=0.32,
    ),
    "bounce": SynthPatch(
        freq=220,
        duration_ms=50,
        noise=0.1,
        attack=0.001,
        decay=0.1,
        release=0.2,
        sustain_level=0.3,
        volume=0.7,
        bitcrush_levels=4,
        mix_volume=0.3,
    ),
    "bounce_hard": SynthPatch(
        freq=200,
        duration_ms=90,
        harmonics=((1.0, 1.0), (0.5, 0.5)),
        sweep=-60,
        noise=0.25,
        attack=0.001,
        decay=0.12,
        release=0.25,
        sustain_level=0.35,
        volume=0.8,
        bitcrush_levels=4,
        mix_volume=0.34,
    ),
    "over": SynthPatch(
        freq=140,
        duration_ms=220,
        harmonics=((1.0, 1.0), (0.64, 0.8)),
        sweep=-60,
        noise=0.3,
        attack=0.004,
        decay=0.28,
        release=0.55,
        sustain_level=0.42,
        volume=0.7,
        bitcrush_levels=4,
        mix_volume=0.32,
    ),
}


class AudioEngine:
    """Mixer init plus synthesised one-shot cues; silently disabled without
    an audio device."""

    def __init__(self, sample_rate: int = 32000, channel_count: int = 12) -> None:
        self.enabled = False
        self.sample_rate = sample_rate
        self.channel_count = channel_count
        self.master_volume: float = 0.45
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        self._channels: List[pygame.mixer.Channel] = []
        self._last_play: Dict[str, int] = {}
        self._sound_gate_ms: int = 45
        self._noise = random.Random(1234)
        self._init_audio()

    def _init_audio(self) -> None:
        try:
            pygame.mixer.init(frequency=self.sample_rate, size=-16, channels=1)
        except pygame.error as exc:
            logger.info("audio disabled: %s", exc)
            return

        pygame.mixer.set_num_channels(self.channel_count)
        mixer_info = pygame.mixer.get_init()
        if mixer_info:
            self.sample_rate = mixer_info[0]
        self._channels = [pygame.mixer.Channel(i) for i in range(self.channel_count)]
        self.sounds = {name: self._render(patch) for name, patch in PATCHES.items()}
        self.enabled = True

    def _wave(self, patch: SynthPatch, freq: float, t: float) -> float:
        cycle_pos = (freq * t) % 1.0
        if patch.waveform == "square":
            return 1.0 if cycle_pos < max(0.05, min(0.95, patch.pulse_width)) else -1.0
        if patch.waveform == "triangle":
            return 4.0 * abs(cycle_pos - 0.5) - 1.0
        return math.sin(2.0 * math.pi * freq * t)

    def _envelope(self, patch: SynthPatch, idx: int, count: int) -> float:
        attack = int(count * patch.attack)
        decay = int(count * patch.decay)
        release = int(count * patch.release)
        sustain_start = min(count, attack + decay)
        sustain_end = max(sustain_start, count - release)
        if attack and idx < attack:
            return idx / attack
        if decay and idx < sustain_start:
            return 1.0 - (1.0 - patch.sustain_level) * ((idx - attack) / decay)
        if idx < sustain_end:
            return patch.sustain_level
        if release > 0:
            return patch.sustain_level * (1.0 - (idx - sustain_end) / release)
        return 0.0

    def _render(self, patch: SynthPatch) -> pygame.mixer.Sound:
        """Render a patch into a 16-bit mono buffer."""
        count = max(1, int(self.sample_rate * patch.duration_ms / 1000))
        samples: List[float] = []
        for idx in range(count):
            t = idx / self.sample_rate
            freq = patch.freq + patch.sweep * (idx / count)
            val = sum(
                weight * self._wave(patch, freq * mult, t)
                for mult, weight in patch.harmonics
            )
            if patch.noise > 0.0:
                val += patch.noise * (self._noise.random() * 2.0 - 1.0)
            val *= max(0.0, self._envelope(patch, idx, count))
            if patch.bitcrush_levels > 0:
                val = round(val * patch.bitcrush_levels) / patch.bitcrush_levels
            samples.append(val)

        peak = max((abs(val) for val in samples), default=1.0) or 1.0
        scale = 32767 * (patch.volume * self.master_volume) / peak
        buffer = array("h", (int(max(-32767, min(32767, v * scale))) for v in samples))
        return pygame.mixer.Sound(buffer=buffer)

    def _find_channel(self) -> pygame.mixer.Channel | None:
        for channel in self._channels:
            if not channel.get_busy():
                return channel
        if self._channels:
            self._channels[0].stop()
            return self._channels[0]
        return None

    def play(self, name: str) -> None:
        if not self.enabled:
            return
        sound = self.sounds.get(name)
        if sound is None:
            return
        now = pygame.time.get_ticks()
        if now - self._last_play.get(name, -self._sound_gate_ms) < self._sound_gate_ms:
            return
        self._last_play[name] = now
        try:
            channel = self._find_channel()
            if channel is None:
                return
            channel.set_volume(PATCHES[name].mix_volume)
            channel.play(sound)
        except pygame.error as exc:
            logger.warning("audio playback failed, disabling: %s", exc)
            self.enabled = False
