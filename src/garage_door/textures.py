"""
Texture images for door materials.

TextureCache is owned by the caller and passed into material construction
explicitly, so the geometry engine itself stays stateless between builds.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)


def generate_wood_texture(
    color: str = "#8b5a2b",
    width: int = 1024,
    height: int = 1024,
    streaks: int = 400,
    seed: Optional[int] = None,
) -> Image.Image:
    """Procedural wood grain: a base fill with faint darker horizontal streaks.

    Args:
        color: Base hex color.
        width, height: Image size in pixels.
        streaks: Number of grain streaks, spread evenly down the image.
        seed: RNG seed for reproducible output.
    """
    rng = np.random.default_rng(seed)
    base = np.array(_hex_to_rgb(color), dtype=float)
    img = np.tile(base, (height, width, 1))

    for i in range(streaks):
        darker = base * (0.85 + rng.random() * 0.1)
        alpha = rng.random() * 0.15
        line_width = int(round(rng.random() * 2.5 + 1))
        y = int(i * (height / streaks) + (rng.random() - 0.5) * 10)
        x0 = int(max(0.0, (rng.random() - 0.5) * width * 0.3))
        y0, y1 = max(0, y), min(height, y + line_width)
        if y0 >= y1:
            continue
        img[y0:y1, x0:] = img[y0:y1, x0:] * (1 - alpha) + darker * alpha

    return Image.fromarray(np.clip(img, 0, 255).astype(np.uint8))


def tile_texture(image: Image.Image, repeat: Tuple[int, int], max_size: int = 2048) -> Image.Image:
    """Repeat an image repeat[0] times across and repeat[1] times down.

    Materials exported through trimesh carry no texture transform, so the
    repeat is baked into the image. Tiles are shrunk first so neither side
    of the result exceeds max_size.
    """
    rep_x, rep_y = (max(1, int(r)) for r in repeat)
    if (rep_x, rep_y) == (1, 1):
        return image
    width, height = image.size
    scale = min(1.0, max_size / (width * rep_x), max_size / (height * rep_y))
    tile_size = (max(1, int(width * scale)), max(1, int(height * scale)))
    tile = image if tile_size == image.size else image.resize(tile_size, Image.Resampling.BILINEAR)
    pixels = np.asarray(tile)
    reps = (rep_y, rep_x) + (1,) * (pixels.ndim - 2)
    return Image.fromarray(np.tile(pixels, reps))


class TextureCache:
    """Long-lived, caller-owned store of texture images.

    Images are keyed by file path or by a generated-texture key. Reads and
    writes are guarded so preload() can fill the cache from a worker thread.
    """

    def __init__(self, loader: Optional[Callable[[str], Image.Image]] = None):
        self._loader = loader or _load_image
        self._images: Dict[str, Image.Image] = {}
        self._lock = threading.Lock()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)

    def get(self, key: str) -> Optional[Image.Image]:
        with self._lock:
            return self._images.get(key)

    def load(self, path: str) -> Image.Image:
        """Return the cached image for path, loading it on first use."""
        key = str(path)
        cached = self.get(key)
        if cached is not None:
            return cached
        image = self._loader(key)
        with self._lock:
            self._images.setdefault(key, image)
            return self._images[key]

    def wood(self, color: str = "#8b5a2b", size: Tuple[int, int] = (1024, 1024), seed: int = 0) -> Image.Image:
        """Cached procedural wood grain for a base color."""
        key = f"wood:{color.lower()}:{size[0]}x{size[1]}:{seed}"
        cached = self.get(key)
        if cached is not None:
            return cached
        image = generate_wood_texture(color, size[0], size[1], seed=seed)
        with self._lock:
            self._images.setdefault(key, image)
            return self._images[key]

    def preload(
        self,
        paths: Iterable[str],
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> Future:
        """Load paths in the background.

        Returns a Future resolved with this cache once every path is loaded
        (or with the first loading error). The caller rebuilds the door when
        it completes; nothing is broadcast.
        """
        paths = [str(p) for p in paths]
        owns_executor = executor is None
        pool = executor or ThreadPoolExecutor(max_workers=1)

        def _work():
            for path in paths:
                self.load(path)
            logger.info("Preloaded %d textures", len(paths))
            return self

        future = pool.submit(_work)
        if owns_executor:
            pool.shutdown(wait=False)
        return future

    def clear(self) -> None:
        with self._lock:
            self._images.clear()


def _load_image(path: str) -> Image.Image:
    if not Path(path).exists():
        raise FileNotFoundError(f"Texture not found: {path}")
    with Image.open(path) as img:
        return img.convert("RGB")


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected #RRGGBB color, got {color!r}")
    return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))
