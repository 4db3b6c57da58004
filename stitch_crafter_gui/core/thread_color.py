from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class ThreadColor:
    """
    One entry of a thread catalog.

    Identity is (id, color): name and symbol are labels and take no part
    in equality or hashing. Catalog ids are unique, so two catalog entries
    compare equal only when they are the same entry. Grid placeholders
    have id None and are told apart by their color.
    """
    id: Optional[int]
    name: str = field(default="", compare=False)
    color: RGB = (0, 0, 0)
    symbol: str = field(default="", compare=False)

    @classmethod
    def placeholder(cls, color):
        """A cell carrying only a raw sample color."""
        r, g, b = color[:3]
        return cls(id=None, color=(int(r), int(g), int(b)))

    @property
    def is_placeholder(self):
        return self.id is None

    @property
    def hex(self):
        return "#{:02x}{:02x}{:02x}".format(*self.color)

    def with_symbol(self, symbol):
        return replace(self, symbol=symbol)
