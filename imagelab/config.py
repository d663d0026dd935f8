"""Конфигурация imagelab: ядра свёртки, параметры тоновой коррекции, гистограммы, логирование."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass


class KernelConfig:
    """Фиксированные ядра свёртки (3x3 размытие, 5x5 резкость)."""
    BLUR = (
        (1.0 / 16, 1.0 / 8, 1.0 / 16),
        (1.0 / 8, 1.0 / 4, 1.0 / 8),
        (1.0 / 16, 1.0 / 8, 1.0 / 16),
    )
    SHARPEN = (
        (-1.0 / 8, -1.0 / 8, -1.0 / 8, -1.0 / 8, -1.0 / 8),
        (-1.0 / 8, 1.0 / 4, 1.0 / 4, 1.0 / 4, -1.0 / 8),
        (-1.0 / 8, 1.0 / 4, 1.0, 1.0 / 4, -1.0 / 8),
        (-1.0 / 8, 1.0 / 4, 1.0 / 4, 1.0 / 4, -1.0 / 8),
        (-1.0 / 8, -1.0 / 8, -1.0 / 8, -1.0 / 8, -1.0 / 8),
    )


class ToneConfig:
    """Параметры цветокоррекции и уровней."""
    # пики ищем в [PEAK_LOW, PEAK_HIGH), края гистограммы отброшены
    PEAK_LOW: int = 10
    PEAK_HIGH: int = 245
    # выходные значения для контрольных точек black / mid / white
    LEVEL_TARGETS = (0, 128, 255)


class HistogramConfig:
    """Размеры и оформление картинки гистограммы."""
    BINS: int = 256
    SIZE: int = 256
    GRID_STEP: int = 16
    BACKGROUND = (255, 255, 255)
    GRID_COLOR = (192, 192, 192)
    CHANNEL_COLORS = ((255, 0, 0), (0, 255, 0), (0, 0, 255))


@dataclass(frozen=True)
class Settings:
    """Настройки времени выполнения."""
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls) -> "Settings":
        """Читает уровень логирования из `IMAGELAB_LOG_LEVEL` (например, "DEBUG")."""
        raw = os.environ.get("IMAGELAB_LOG_LEVEL", "").strip().upper()
        level = logging.getLevelName(raw) if raw else logging.INFO
        if not isinstance(level, int):
            raise ValueError(f"Неизвестный уровень логирования: {raw}")
        return cls(log_level=level)
