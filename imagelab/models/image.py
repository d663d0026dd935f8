"""Изображение: прямоугольная сетка пикселей и операции над ней.

Принципы:
- Неизменяемость: данные хранятся в read-only массиве numpy (H, W, 3) uint8,
  каждая операция возвращает новый `Image`.
- Векторизация: попиксельные операции выражены через numpy, правила округления
  (к ближайшему, половина вверх / отбрасывание дробной части) соблюдаются точно.
"""
from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Iterator, List, Sequence, Tuple

import numpy as np

from imagelab.config import KernelConfig
from imagelab.models.pixel import Pixel
from imagelab.services import tone_curve, wavelet

if TYPE_CHECKING:
    from imagelab.services.filters import FilterStrategy


class Channel(IntEnum):
    RED = 0
    GREEN = 1
    BLUE = 2


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def _to_pixels(values: np.ndarray) -> np.ndarray:
    """Приводит массив к uint8 с ограничением [0, 255]."""
    return np.clip(values, 0, 255).astype(np.uint8)


class Image:
    """Неизменяемое RGB-изображение.

    Координаты (x, y): x задаёт столбец, y задаёт строку.
    """

    def __init__(self, pixels: Sequence[Sequence[Pixel]]) -> None:
        if len(pixels) == 0 or len(pixels[0]) == 0:
            raise ValueError("Изображение должно содержать хотя бы один пиксель")
        width = len(pixels[0])
        if any(len(row) != width for row in pixels):
            raise ValueError("Все строки изображения должны быть одной длины")
        data = np.array([[p.as_tuple() for p in row] for row in pixels], dtype=np.uint8)
        self._data = self._freeze(data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Image":
        """Создаёт изображение из массива (H, W, 3); значения ограничиваются [0, 255]."""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] != 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
            raise ValueError(f"Ожидался непустой массив формы (H, W, 3), получено {arr.shape}")
        image = cls.__new__(cls)
        if arr.dtype != np.uint8:
            arr = _to_pixels(arr)
        image._data = cls._freeze(arr.copy())
        return image

    @staticmethod
    def _freeze(data: np.ndarray) -> np.ndarray:
        data.setflags(write=False)
        return data

    # ---------- Доступ ----------
    @property
    def width(self) -> int:
        return int(self._data.shape[1])

    @property
    def height(self) -> int:
        return int(self._data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Координаты вне изображения: ({x}, {y})")

    def get_pixel(self, x: int, y: int) -> Pixel:
        self._check_bounds(x, y)
        r, g, b = self._data[y, x]
        return Pixel(int(r), int(g), int(b))

    def with_pixel(self, x: int, y: int, pixel: Pixel) -> "Image":
        """Копия изображения, в которой пиксель (x, y) заменён."""
        self._check_bounds(x, y)
        data = self.to_array()
        data[y, x] = pixel.as_tuple()
        return Image.from_array(data)

    def to_array(self) -> np.ndarray:
        """Записываемая копия данных (H, W, 3) uint8."""
        return self._data.copy()

    def rows(self) -> Iterator[List[Pixel]]:
        for y in range(self.height):
            yield [Pixel(*map(int, self._data[y, x])) for x in range(self.width)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return np.array_equal(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Image(width={self.width}, height={self.height})"

    # ---------- Геометрия ----------
    def horizontal_flip(self) -> "Image":
        return Image.from_array(self._data[:, ::-1])

    def vertical_flip(self) -> "Image":
        return Image.from_array(self._data[::-1, :])

    # ---------- Попиксельные операции ----------
    def extract_channel(self, channel: Channel) -> "Image":
        """Оставляет один канал, два других обнуляются."""
        data = np.zeros_like(self._data)
        data[:, :, channel] = self._data[:, :, channel]
        return Image.from_array(data)

    def brighten(self, delta: int) -> "Image":
        """Добавляет `delta` к каждому каналу с ограничением [0, 255] (с потерями на краях)."""
        # шаг за пределами [-255, 255] даёт тот же результат, что и сам предел
        delta = max(-255, min(int(delta), 255))
        return Image.from_array(_to_pixels(self._data.astype(np.int32) + delta))

    def _gray(self, values: np.ndarray) -> "Image":
        return Image.from_array(np.repeat(values[:, :, np.newaxis], 3, axis=2))

    def to_value(self) -> "Image":
        return self._gray(self._data.max(axis=2))

    def to_intensity(self) -> "Image":
        """Среднее трёх каналов с целочисленным делением (отбрасывание дробной части)."""
        return self._gray(self._data.astype(np.int32).sum(axis=2) // 3)

    def to_luma(self) -> "Image":
        """Яркость 0.2126 R + 0.7152 G + 0.0722 B, округление половины вверх."""
        r, g, b = self._float_channels()
        luma = 0.2126 * r + 0.7152 * g + 0.0722 * b
        return self._gray(_to_pixels(_round_half_up(luma)))

    def to_sepia(self) -> "Image":
        """Сепия; дробная часть отбрасывается, а не округляется."""
        r, g, b = self._float_channels()
        sepia = np.stack(
            [
                0.393 * r + 0.769 * g + 0.189 * b,
                0.349 * r + 0.686 * g + 0.168 * b,
                0.272 * r + 0.534 * g + 0.131 * b,
            ],
            axis=2,
        )
        return Image.from_array(_to_pixels(np.minimum(255, np.trunc(sepia))))

    def _float_channels(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        data = self._data.astype(np.float64)
        return data[:, :, 0], data[:, :, 1], data[:, :, 2]

    # ---------- Свёртка ----------
    def apply_kernel(self, kernel: Sequence[Sequence[float]]) -> "Image":
        """Свёртка квадратным ядром нечётного размера.

        Соседи за границей изображения пропускаются (без отражения и без повторения краёв),
        сумма округляется к ближайшему и ограничивается [0, 255].

        Raises:
            ValueError: если ядро не квадратное или чётного размера.
        """
        weights = np.asarray(kernel, dtype=np.float64)
        if weights.ndim != 2 or weights.shape[0] != weights.shape[1] or weights.shape[0] % 2 == 0:
            raise ValueError(f"Ядро должно быть квадратным нечётного размера, получено {weights.shape}")
        radius = weights.shape[0] // 2
        height, width = self.height, self.width
        padded = np.pad(
            self._data.astype(np.float64),
            ((radius, radius), (radius, radius), (0, 0)),
            mode="constant",
        )
        total = np.zeros((height, width, 3), dtype=np.float64)
        # dx снаружи, dy внутри: тот же порядок суммирования для каждого пикселя
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                window = padded[radius + dy:radius + dy + height, radius + dx:radius + dx + width]
                total += window * weights[dy + radius, dx + radius]
        return Image.from_array(_to_pixels(_round_half_up(total)))

    def blur(self) -> "Image":
        return self.apply_kernel(KernelConfig.BLUR)

    def sharpen(self) -> "Image":
        return self.apply_kernel(KernelConfig.SHARPEN)

    # ---------- Гистограммы и цветокоррекция ----------
    def calculate_histograms(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Три гистограммы по 256 корзин (R, G, B)."""
        return tuple(  # type: ignore[return-value]
            np.bincount(self._data[:, :, c].ravel(), minlength=256).astype(np.int64)
            for c in Channel
        )

    def color_correct(self) -> "Image":
        """Выравнивает пики гистограмм каналов по их среднему."""
        peaks = [tone_curve.find_meaningful_peak(h) for h in self.calculate_histograms()]
        target = tone_curve.average_peak(peaks)
        offsets = np.array([target - peak for peak in peaks], dtype=np.int32)
        return Image.from_array(_to_pixels(self._data.astype(np.int32) + offsets))

    def adjust_levels(self, black: int, mid: int, white: int) -> "Image":
        """Квадратичная кривая уровней через (b, 0), (m, 128), (w, 255).

        Raises:
            ValueError: см. `tone_curve.validate_levels`.
        """
        a, c, d = tone_curve.level_coefficients(black, mid, white)
        x = self._data.astype(np.float64)
        curve = a * x * x + c * x + d
        return Image.from_array(_to_pixels(np.trunc(curve)))

    # ---------- Сжатие ----------
    def compress(self, percentage: float) -> "Image":
        """Сжатие с потерями через вейвлет Хаара.

        Args:
            percentage: Доля отбрасываемых коэффициентов, 0..100.

        Raises:
            ValueError: если `percentage` вне [0, 100].
        """
        if not 0 <= percentage <= 100:
            raise ValueError("Процент сжатия должен быть в диапазоне 0..100")
        return Image.from_array(wavelet.compress_channels(self._data, float(percentage)))

    # ---------- Каналы ----------
    @staticmethod
    def combine_channels(red: "Image", green: "Image", blue: "Image") -> "Image":
        """Собирает изображение из R первого, G второго и B третьего изображения.

        Raises:
            ValueError: если размеры изображений различаются.
        """
        if not (red.size == green.size == blue.size):
            raise ValueError("Все изображения должны быть одного размера")
        data = np.stack(
            [red._data[:, :, Channel.RED], green._data[:, :, Channel.GREEN], blue._data[:, :, Channel.BLUE]],
            axis=2,
        )
        return Image.from_array(data)

    def apply_filter(self, strategy: "FilterStrategy") -> "Image":
        return strategy.apply(self)
