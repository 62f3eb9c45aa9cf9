# viz/image.py
from __future__ import annotations
import logging
import os
from typing import Iterator, List, Optional, Sequence

import numpy as np
import pygame as pg


class Image:
    """
    RGB image held as a (height, width, 3) uint8 array.

    Feature rows are row-major (y, then x) with intensities scaled to [0, 1].
    Grayscale rows hold one value per pixel; color rows interleave R, G, B.
    """

    def __init__(self, pixels: np.ndarray):
        px = np.asarray(pixels)
        if px.ndim != 3 or px.shape[2] != 3:
            raise ValueError(f"Expected pixels of shape (H, W, 3), got {px.shape}")
        self.pixels = px.astype(np.uint8, copy=True)

    # --- constructors ---
    @classmethod
    def from_surface(cls, surf: pg.Surface) -> "Image":
        # surfarray is indexed [x, y]
        return cls(pg.surfarray.array3d(surf).transpose(1, 0, 2))

    @classmethod
    def from_file(cls, path: str) -> "Image":
        return cls.from_surface(pg.image.load(path))

    @classmethod
    def from_row(cls, row: Sequence[float], width: int, height: int, color: bool = False) -> "Image":
        """Rebuild an image from a feature row (truth column, if any, already removed)."""
        values = np.asarray(row, dtype=float).reshape(-1)
        channels = 3 if color else 1
        need = width * height * channels
        if values.size < need:
            raise ValueError(f"row has {values.size} values, need {need} for {width}x{height}")
        scaled = np.rint(values[:need] * 255.0).clip(0, 255).astype(np.uint8)
        if color:
            px = scaled.reshape(height, width, 3)
        else:
            px = np.repeat(scaled.reshape(height, width, 1), 3, axis=2)
        return cls(px)

    # --- geometry ---
    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def sub_image(self, left: int, top: int, right: int, bottom: int) -> "Image":
        return Image(self.pixels[top:bottom, left:right])

    # --- conversions ---
    def _gray(self) -> np.ndarray:
        # integer channel average
        return (self.pixels.astype(np.uint16).sum(axis=2) // 3).astype(np.uint8)

    def to_grayscale(self) -> "Image":
        g = self._gray()
        return Image(np.repeat(g[:, :, None], 3, axis=2))

    def grayscale_row(self, truth: Optional[float] = None) -> np.ndarray:
        values = self._gray().reshape(-1).astype(float)
        if truth is not None:
            values = np.append(values, truth * 255.0)
        return values / 255.0

    def color_row(self, truth: Optional[float] = None) -> np.ndarray:
        values = self.pixels.reshape(-1).astype(float)
        if truth is not None:
            values = np.append(values, truth * 255.0)
        return values / 255.0

    def to_surface(self) -> pg.Surface:
        return pg.surfarray.make_surface(self.pixels.transpose(1, 0, 2))

    def save(self, path: str) -> None:
        pg.image.save(self.to_surface(), path)


class ImageDirectorySource:
    """
    Feature rows for every image in a directory, each labelled with `truth`.
    Images with the wrong size, or files pygame cannot decode, are skipped.
    """
    def __init__(self, directory: str, truth: float, width: int, height: int,
                 color: bool = False, logger: Optional[logging.Logger] = None):
        self.directory = directory
        self.truth = float(truth)
        self.width = int(width)
        self.height = int(height)
        self.color = bool(color)
        self._log = logger or logging.getLogger(__name__)
        self.skipped: List[str] = []

    def rows(self) -> Iterator[np.ndarray]:
        for name in sorted(os.listdir(self.directory)):
            path = os.path.join(self.directory, name)
            if not os.path.isfile(path):
                continue
            try:
                image = Image.from_file(path)
            except pg.error as e:
                self._log.warning("file %s could not be read as an image, skipping (%s)", path, e)
                self.skipped.append(path)
                continue

            if image.width != self.width or image.height != self.height:
                self._log.warning(
                    "file %s not correct size, skipping (want %dx%d, got %dx%d)",
                    path, self.width, self.height, image.width, image.height,
                )
                self.skipped.append(path)
                continue

            yield image.color_row(self.truth) if self.color else image.grayscale_row(self.truth)
