"""Vehicle record owned by the vehicle store."""

from typing import Any, Dict, Optional


class Vehicle:
    """A user's vehicle: identity, configuration and current mileage."""

    def __init__(
        self,
        id: str,
        make: str,
        model: str,
        year: int,
        drivetrain: str,
        mileage: int,
        nickname: Optional[str] = None,
        added_date: Optional[str] = None,
    ):
        self.id = id
        self.make = make
        self.model = model
        self.year = year
        self.drivetrain = drivetrain
        self.mileage = mileage
        self.nickname = nickname
        self.added_date = added_date

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.year} {self.make} {self.model}"

    @property
    def display_name(self) -> str:
        return self.nickname or self.name

    def __repr__(self) -> str:
        return f"Vehicle({self.id!r}, {self.name!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase document format."""
        d: Dict[str, Any] = {
            "id": self.id,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "drivetrain": self.drivetrain,
            "mileage": self.mileage,
        }
        if self.nickname is not None:
            d["nickname"] = self.nickname
        if self.added_date is not None:
            d["addedDate"] = self.added_date
        return d

    @classmethod
    def from_dict(cls, dct: Dict[str, Any]) -> "Vehicle":
        return cls(
            dct["id"],
            dct["make"],
            dct["model"],
            int(dct["year"]),
            dct["drivetrain"],
            int(dct["mileage"]),
            dct.get("nickname"),
            dct.get("addedDate"),
        )
