"""Сервис обработки: именованные изображения и операции над ними.

Принципы:
- SRP: сервис хранит изображения по именам и делегирует вычисления `Image` и стратегиям.
- Исходное изображение не мутируется: результат всегда кладётся под имя назначения.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

import numpy as np

from imagelab.models.image import Channel, Image
from imagelab.services.filters import FilterStrategy, create_filter, with_split
from imagelab.services.histogram_renderer import render_histogram
from imagelab.utils.logging import get_logger

logger = get_logger()


class ImageNotFoundError(LookupError):
    """Изображение с таким именем не загружено."""


class ProcessService:
    def __init__(self) -> None:
        self._images: Dict[str, Image] = {}

    # ---------- Хранилище ----------
    def add(self, name: str, image: Image) -> None:
        self._images[name] = image

    def get(self, name: str) -> Image:
        try:
            return self._images[name]
        except KeyError:
            raise ImageNotFoundError(f"Изображение не найдено: {name}") from None

    def names(self) -> List[str]:
        return sorted(self._images)

    def __contains__(self, name: str) -> bool:
        return name in self._images

    # ---------- Вспомогательные функции ----------
    def _store(self, dest: str, image: Image) -> Image:
        self._images[dest] = image
        return image

    def apply_filter(self, strategy: FilterStrategy, name: str, dest: str,
                     split: Optional[float] = None) -> Image:
        """Применяет стратегию (при `split` только к левой части) и сохраняет результат."""
        image = self.get(name)
        return self._store(dest, image.apply_filter(with_split(strategy, split)))

    # ---------- Компоненты ----------
    def component(self, channel: Channel, name: str, dest: str) -> Image:
        return self._store(dest, self.get(name).extract_channel(channel))

    def value_component(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("value-component"), name, dest, split)

    def luma_component(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("luma-component"), name, dest, split)

    def intensity_component(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("intensity-component"), name, dest, split)

    # ---------- Фильтры ----------
    def sepia(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("sepia"), name, dest, split)

    def blur(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("blur"), name, dest, split)

    def sharpen(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("sharpen"), name, dest, split)

    def color_correct(self, name: str, dest: str, split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("color-correct"), name, dest, split)

    def adjust_levels(self, black: int, mid: int, white: int, name: str, dest: str,
                      split: Optional[float] = None) -> Image:
        return self.apply_filter(create_filter("levels-adjust", black, mid, white), name, dest, split)

    # ---------- Геометрия и яркость ----------
    def horizontal_flip(self, name: str, dest: str) -> Image:
        return self._store(dest, self.get(name).horizontal_flip())

    def vertical_flip(self, name: str, dest: str) -> Image:
        return self._store(dest, self.get(name).vertical_flip())

    def brighten(self, delta: int, name: str, dest: str) -> Image:
        return self._store(dest, self.get(name).brighten(delta))

    # ---------- Каналы ----------
    def rgb_split(self, name: str, red_dest: str, green_dest: str, blue_dest: str) -> Tuple[Image, Image, Image]:
        image = self.get(name)
        return (
            self._store(red_dest, image.extract_channel(Channel.RED)),
            self._store(green_dest, image.extract_channel(Channel.GREEN)),
            self._store(blue_dest, image.extract_channel(Channel.BLUE)),
        )

    def rgb_combine(self, dest: str, red_name: str, green_name: str, blue_name: str) -> Image:
        combined = Image.combine_channels(self.get(red_name), self.get(green_name), self.get(blue_name))
        return self._store(dest, combined)

    # ---------- Гистограммы и сжатие ----------
    def histograms(self, name: str) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return self.get(name).calculate_histograms()

    def histogram_image(self, name: str, dest: str) -> Image:
        """Сохраняет под `dest` картинку 256x256 с гистограммами каналов."""
        return self._store(dest, render_histogram(self.histograms(name)))

    def compress(self, percentage: float, name: str, dest: str) -> Image:
        """Сжатие через вейвлет Хаара.

        Raises:
            ValueError: если `percentage` вне [0, 100] (проверяется до поиска изображения).
            ImageNotFoundError: если изображения нет.
        """
        if not 0 <= percentage <= 100:
            raise ValueError("Процент сжатия должен быть в диапазоне 0..100")
        image = self.get(name)
        logger.debug("Сжатие %s на %.1f%% -> %s", name, percentage, dest)
        return self._store(dest, image.compress(percentage))
