"""Maintenance type definitions and the registry that schedules refer to."""

from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional


class Severity(Enum):
    """Qualitative importance of a service. Used for display emphasis only."""

    CRITICAL = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: str) -> "Severity":
        return cls[value.strip().upper()]


class MaintenanceTypeDef:
    """Canonical definition of a service type (oil change, brake fluid, ...)."""

    def __init__(
        self,
        key: str,
        name: str,
        description: str = "",
        category: str = "general",
        severity: Severity = Severity.MEDIUM,
    ):
        self.key = key
        self.name = name
        self.description = description
        self.category = category
        self.severity = severity

    def __repr__(self) -> str:
        return f"MaintenanceTypeDef({self.key!r})"

    def to_dict(self) -> Dict[str, str]:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "severity": self.severity.name.lower(),
            "severityLabel": self.severity.label,
        }


class MaintenanceTypeRegistry:
    """Lookup of MaintenanceTypeDef by key, in declaration order."""

    def __init__(self, types: Optional[Iterable[MaintenanceTypeDef]] = None):
        self._types: Dict[str, MaintenanceTypeDef] = {}
        for type_def in types or []:
            self._types[type_def.key] = type_def

    def get(self, key: str) -> Optional[MaintenanceTypeDef]:
        return self._types.get(key)

    def by_category(self, category: str) -> List[MaintenanceTypeDef]:
        return [t for t in self._types.values() if t.category == category]

    def categories(self) -> List[str]:
        """Distinct categories in order of first appearance."""
        return list(dict.fromkeys(t.category for t in self._types.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._types

    def __iter__(self) -> Iterator[MaintenanceTypeDef]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
