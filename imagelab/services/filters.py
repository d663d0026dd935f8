"""
Стратегии фильтров

Каждая стратегия оборачивает ровно одну операцию `Image`:
- ValueFilter / LumaFilter / IntensityFilter: компоненты в оттенках серого
- SepiaFilter, BlurFilter, SharpenFilter, ColorCorrectFilter
- AdjustLevelsFilter: хранит три контрольные точки уровней

`SplitFilterDecorator` оборачивает любую стратегию и оставляет исходные пиксели
правее столбца разделения: так работает предпросмотр для любого фильтра.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from imagelab.models.image import Image
from imagelab.utils.logging import get_logger

logger = get_logger()


class FilterStrategy(ABC):
    """
    Абстрактный базовый класс фильтра.

    Стратегия: чистое преобразование `Image -> Image`, вход не изменяется.
    """

    @abstractmethod
    def apply(self, image: Image) -> Image:
        """Возвращает новое изображение с применённым фильтром."""

    @abstractmethod
    def get_filter_name(self) -> str:
        """Имя команды фильтра."""


class ValueFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.to_value()

    def get_filter_name(self) -> str:
        return "value-component"


class LumaFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.to_luma()

    def get_filter_name(self) -> str:
        return "luma-component"


class IntensityFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.to_intensity()

    def get_filter_name(self) -> str:
        return "intensity-component"


class SepiaFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.to_sepia()

    def get_filter_name(self) -> str:
        return "sepia"


class BlurFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.blur()

    def get_filter_name(self) -> str:
        return "blur"


class SharpenFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.sharpen()

    def get_filter_name(self) -> str:
        return "sharpen"


class ColorCorrectFilter(FilterStrategy):
    def apply(self, image: Image) -> Image:
        return image.color_correct()

    def get_filter_name(self) -> str:
        return "color-correct"


class AdjustLevelsFilter(FilterStrategy):
    """
    Уровни по контрольным точкам black / mid / white.

    Точки проверяются при применении, в `Image.adjust_levels`.
    """

    def __init__(self, black: int, mid: int, white: int) -> None:
        self.black = black
        self.mid = mid
        self.white = white

    def apply(self, image: Image) -> Image:
        return image.adjust_levels(self.black, self.mid, self.white)

    def get_filter_name(self) -> str:
        return "levels-adjust"


class SplitFilterDecorator(FilterStrategy):
    """
    Применяет обёрнутую стратегию только к левой части изображения.

    Столбцы [0, split_x) берутся из результата фильтра, [split_x, width) из оригинала,
    где split_x = floor(width * percentage / 100).
    """

    def __init__(self, strategy: FilterStrategy, split_percentage: float) -> None:
        if not 0 <= split_percentage <= 100:
            raise ValueError("Процент разделения должен быть в диапазоне 0..100")
        self.strategy = strategy
        self.split_percentage = float(split_percentage)

    def split_point(self, width: int) -> int:
        return int(width * (self.split_percentage / 100.0))

    def apply(self, image: Image) -> Image:
        filtered = self.strategy.apply(image)
        split_x = self.split_point(image.width)
        logger.debug("%s: разделение по столбцу %d из %d", self.get_filter_name(), split_x, image.width)

        mixed = image.to_array()
        mixed[:, :split_x] = filtered.to_array()[:, :split_x]
        return Image.from_array(mixed)

    def get_filter_name(self) -> str:
        return self.strategy.get_filter_name()


_FILTERS: Dict[str, Callable[..., FilterStrategy]] = {
    "value-component": ValueFilter,
    "luma-component": LumaFilter,
    "intensity-component": IntensityFilter,
    "sepia": SepiaFilter,
    "blur": BlurFilter,
    "sharpen": SharpenFilter,
    "color-correct": ColorCorrectFilter,
    "levels-adjust": AdjustLevelsFilter,
}


def filter_names() -> list:
    return sorted(_FILTERS)


def create_filter(name: str, *args: int) -> FilterStrategy:
    """
    Создаёт стратегию по имени команды.

    Args:
        name: Имя команды, например "blur" или "levels-adjust".
        *args: Аргументы конструктора (только "levels-adjust" принимает b, m, w).

    Returns:
        Экземпляр FilterStrategy.

    Raises:
        ValueError: если имя не распознано.
    """
    try:
        factory = _FILTERS[name]
    except KeyError:
        raise ValueError(f"Неизвестный фильтр: {name}") from None
    return factory(*args)


def with_split(strategy: FilterStrategy, split_percentage: Optional[float]) -> FilterStrategy:
    """Оборачивает стратегию в `SplitFilterDecorator`, если задан процент разделения."""
    if split_percentage is None:
        return strategy
    return SplitFilterDecorator(strategy, split_percentage)
