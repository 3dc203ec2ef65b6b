# domain/categories.py
import colorsys

GOLDEN_RATIO_CONJUGATE = 0.618033988749895


class CategoryPalette:
    """
    Stable-but-arbitrary category -> (index, colour) assignment.

    Owned by one snapshot; a refresh starts a new palette. Only the snapshot
    build calls `index`; readers use `get`, `hue` and `rgb`, which never assign.
    """

    def __init__(self, lightness: float = 0.3, saturation: float = 0.8):
        self.lightness, self.saturation = lightness, saturation
        self._index: dict[str, int] = {}

    def index(self, category: str) -> int:
        return self._index.setdefault(category, len(self._index))

    def get(self, category: str) -> int | None:
        return self._index.get(category)

    def hue(self, category: str) -> float | None:
        i = self.get(category)
        return None if i is None else (i * GOLDEN_RATIO_CONJUGATE) % 1

    def rgb(self, category: str) -> tuple[float, float, float] | None:
        h = self.hue(category)
        return None if h is None else colorsys.hls_to_rgb(h, self.lightness, self.saturation)

    def __contains__(self, category: str) -> bool:
        return category in self._index

    def __len__(self) -> int:
        return len(self._index)
