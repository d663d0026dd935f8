"""Модели данных для загруженных изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from imagelab.models.image import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель загруженного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        image: Загруженное изображение.
        width: Ширина, px.
        height: Высота, px.
        format: Формат файла, например "PPM" или "PNG".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    image: Image
    width: int
    height: int
    format: str
    size_bytes: Optional[int]
