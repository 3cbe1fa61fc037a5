"""Addressing of the piles on a Klondike table."""

from dataclasses import dataclass
from enum import Enum

FOUNDATION_COUNT = 4
TABLEAU_COUNT = 7


class PileKind(Enum):
    """Kinds of pile."""

    STOCK = "stock"
    WASTE = "waste"
    FOUNDATION = "foundation"
    TABLEAU = "tableau"


@dataclass(frozen=True)
class PileRef:
    """A pile on the table; index is only meaningful for foundations and tableau columns."""

    kind: PileKind
    index: int = 0

    def __post_init__(self) -> None:
        limits = {
            PileKind.STOCK: 1,
            PileKind.WASTE: 1,
            PileKind.FOUNDATION: FOUNDATION_COUNT,
            PileKind.TABLEAU: TABLEAU_COUNT,
        }
        if not 0 <= self.index < limits[self.kind]:
            raise ValueError(f"No {self.kind.value} pile at index {self.index}")

    def __str__(self) -> str:
        if self.kind in (PileKind.FOUNDATION, PileKind.TABLEAU):
            return f"{self.kind.value}-{self.index}"
        return self.kind.value

    @classmethod
    def stock(cls) -> "PileRef":
        return cls(PileKind.STOCK)

    @classmethod
    def waste(cls) -> "PileRef":
        return cls(PileKind.WASTE)

    @classmethod
    def foundation(cls, index: int) -> "PileRef":
        return cls(PileKind.FOUNDATION, index)

    @classmethod
    def tableau(cls, index: int) -> "PileRef":
        return cls(PileKind.TABLEAU, index)
