"""Fixed catalog of phonetics quiz items."""

import random
import string
from dataclasses import dataclass
from typing import Iterable, Sequence

# Cycled over the letters so neighbouring buttons differ in colour
_COLOR_HINTS = (
    "#ef4444",
    "#f97316",
    "#eab308",
    "#22c55e",
    "#06b6d4",
    "#3b82f6",
    "#8b5cf6",
    "#ec4899",
)


@dataclass(frozen=True)
class CatalogItem:
    """A single phonetics item: the symbol shown and the sound that names it."""

    id: str
    symbol: str
    audio_cue: str
    color_hint: str


def _letter_items() -> list[CatalogItem]:
    return [
        CatalogItem(
            id=f"letter-{letter}",
            symbol=letter,
            audio_cue=f"/sounds/letters/{letter}.mp3",
            color_hint=_COLOR_HINTS[index % len(_COLOR_HINTS)],
        )
        for index, letter in enumerate(string.ascii_lowercase)
    ]


class PhoneticsCatalog:
    """Read-only collection of catalog items with random selection helpers."""

    def __init__(self, items: Iterable[CatalogItem] | None = None):
        self._items: tuple[CatalogItem, ...] = tuple(
            _letter_items() if items is None else items
        )
        self._by_id = {item.id: item for item in self._items}
        if len(self._by_id) != len(self._items):
            raise ValueError("Catalog item ids must be unique")

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def all(self) -> Sequence[CatalogItem]:
        return self._items

    def get(self, item_id: str) -> CatalogItem | None:
        return self._by_id.get(item_id)

    def random_item(self, rng: random.Random) -> CatalogItem | None:
        if not self._items:
            return None
        return rng.choice(self._items)

    def choices_for(
        self, target: CatalogItem, count: int, rng: random.Random
    ) -> list[CatalogItem]:
        """Pick `count` items including `target`, in random order.

        Distractors are drawn without repetition from the rest of the catalog.
        If the catalog is too small, every item is used.
        """
        others = [item for item in self._items if item.id != target.id]
        distractors = rng.sample(others, min(max(count - 1, 0), len(others)))
        choices = [target, *distractors]
        rng.shuffle(choices)
        return choices
