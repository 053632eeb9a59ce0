"""Entry point for the Shield Snake game."""

from __future__ import annotations

from shield_snake.game import main

if __name__ == "__main__":
    main()
