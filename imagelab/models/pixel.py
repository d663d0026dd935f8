"""Пиксель: неизменяемая тройка 8-битных каналов."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


def clamp_channel(value: int) -> int:
    """Ограничивает значение канала диапазоном [0, 255]."""
    return max(0, min(int(value), 255))


@dataclass(frozen=True)
class Pixel:
    """Значение RGB; каждый канал приводится к [0, 255] при создании."""
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", clamp_channel(self.red))
        object.__setattr__(self, "green", clamp_channel(self.green))
        object.__setattr__(self, "blue", clamp_channel(self.blue))

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.red, self.green, self.blue)
