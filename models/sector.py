from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Sector:
    """A named parking zone, or UNASSIGNED (name is None).

    UNASSIGNED is a wildcard: a sector-less spot is eligible under any sector
    filter, and filtering by UNASSIGNED accepts every spot.
    """
    name: Optional[str] = None

    @classmethod
    def of(cls, value) -> "Sector":
        if isinstance(value, Sector):
            return value
        if value is None:
            return UNASSIGNED
        text = str(value).strip()
        if not text or text.lower() in ("null", "none", "nan"):
            return UNASSIGNED
        return cls(text)

    @property
    def is_unassigned(self) -> bool:
        return self.name is None

    @property
    def label(self) -> str:
        return self.name if self.name is not None else "unassigned"

    def accepts(self, spot_sector: "Sector") -> bool:
        """Whether a spot in `spot_sector` passes a filter for this sector."""
        if self.is_unassigned or spot_sector.is_unassigned:
            return True
        return self.name == spot_sector.name

    def __str__(self) -> str:
        return self.label


UNASSIGNED = Sector()
