from __future__ import annotations

from dataclasses import dataclass

from .constants import DIRECTION_DEFAULT, DIRECTIONS


@dataclass(frozen=True)
class RenderConfig:
    direction: str = DIRECTION_DEFAULT

    def __post_init__(self) -> None:
        if self.direction not in DIRECTIONS:
            raise ValueError(
                f"unknown flowchart direction {self.direction!r} "
                f"(expected one of {', '.join(DIRECTIONS)})"
            )
