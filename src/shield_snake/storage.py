"""Best-score and skin persistence for the host; the core never touches disk."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import DEFAULT_SKIN, HIGHSCORE_FILE, SKIN_FILE, SKINS

logger = logging.getLogger(__name__)


class ScoreStore:
    """Plain-text files holding the best score and the selected skin id."""

    def __init__(
        self, highscore_file: Path = HIGHSCORE_FILE, skin_file: Path = SKIN_FILE
    ) -> None:
        self.highscore_file = Path(highscore_file)
        self.skin_file = Path(skin_file)

    def load_best(self) -> int:
        try:
            text = self.highscore_file.read_text(encoding="utf-8")
            return max(0, int(text.strip() or "0"))
        except (OSError, ValueError):
            return 0

    def save_best(self, score: int) -> None:
        self._write(self.highscore_file, str(int(score)))

    def record(self, score: int) -> int:
        """Persist ``score`` if it beats the stored best; return the best."""
        best = self.load_best()
        if score > best:
            self.save_best(score)
            return score
        return best

    def load_skin(self) -> str:
        try:
            skin = self.skin_file.read_text(encoding="utf-8").strip()
        except OSError:
            return DEFAULT_SKIN
        return skin if skin in SKINS else DEFAULT_SKIN

    def save_skin(self, skin: str) -> None:
        if skin not in SKINS:
            raise ValueError(f"unknown skin: {skin!r}")
        self._write(self.skin_file, skin)

    def _write(self, path: Path, text: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.warning("could not write %s: %s", path, exc)
