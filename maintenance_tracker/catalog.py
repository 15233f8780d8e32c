"""
Schedule catalog: manufacturers, models and their maintenance schedules.

Catalog data ships as YAML reference tables under ``data/``:

- ``maintenance_types.yaml``: the maintenance type registry
- ``manufacturers/*.yaml``: one file per region, each a list of makes

Loose shapes in the data files (a drivetrain given as ``"AWD"`` or as
``{code: AWD, label: ...}``, years given as a mapping or a single year)
are normalized here so the engine only ever sees typed objects.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .exceptions import CatalogError
from .maintenance_type import MaintenanceTypeDef, MaintenanceTypeRegistry, Severity
from .manufacturer import Manufacturer, Model
from .schedule_item import ScheduleItem

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
TYPES_FILE = "maintenance_types.yaml"
MANUFACTURERS_DIR = "manufacturers"

Overlap = Tuple[str, str, Model, Model]


class Catalog:
    """Static reference data the scheduling engine resolves schedules from."""

    def __init__(
        self,
        manufacturers: List[Manufacturer],
        types: Optional[MaintenanceTypeRegistry] = None,
    ):
        self._manufacturers = sorted(manufacturers, key=lambda m: m.name.casefold())
        self.types = types or MaintenanceTypeRegistry()
        self.overlaps: List[Overlap] = _find_overlaps(self._manufacturers)
        for make, model, first, second in self.overlaps:
            logger.warning(
                "Overlapping year ranges for %s %s: %s-%s and %s-%s "
                "(first declared wins)",
                make,
                model,
                first.year_start,
                first.year_end,
                second.year_start,
                second.year_end,
            )

    def list_manufacturers(self) -> List[Manufacturer]:
        """All manufacturers, sorted by name."""
        return list(self._manufacturers)

    def find_manufacturer(self, name: str) -> Optional[Manufacturer]:
        """Case-insensitive exact match on manufacturer name."""
        if not name:
            return None
        wanted = name.casefold()
        for manufacturer in self._manufacturers:
            if manufacturer.name.casefold() == wanted:
                return manufacturer
        return None

    def find_model(self, make: str, model: str, year: int) -> Optional[Model]:
        manufacturer = self.find_manufacturer(make)
        if manufacturer is None:
            return None
        return manufacturer.find_model(model, year)

    def resolve_schedule(self, make: str, model: str, year: int) -> List[ScheduleItem]:
        """
        Get the maintenance schedule for a vehicle configuration.

        Returns an empty list when nothing matches; a catalog miss is not an
        error. When several generations match the year, the first declared
        one wins.
        """
        manufacturer = self.find_manufacturer(make)
        if manufacturer is None:
            return []
        matching = manufacturer.find_model(model, year)
        if matching is None:
            return []
        return list(manufacturer.schedules.get(matching.schedule_group) or [])

    def model_names(self, make: str) -> List[str]:
        """Unique model names for a make, sorted alphabetically."""
        manufacturer = self.find_manufacturer(make)
        if manufacturer is None:
            return []
        return sorted({m.name for m in manufacturer.models})

    def model_years(self, make: str, model: str) -> List[int]:
        """Every year covered by any generation of a model, newest first."""
        manufacturer = self.find_manufacturer(make)
        if manufacturer is None:
            return []
        years = set()
        for entry in manufacturer.models:
            if entry.name == model:
                years.update(entry.years)
        return sorted(years, reverse=True)

    def drivetrains(self, make: str, model: str, year: int) -> List[str]:
        matching = self.find_model(make, model, year)
        return list(matching.drivetrains) if matching else []


def _find_overlaps(manufacturers: List[Manufacturer]) -> List[Overlap]:
    overlaps = []
    for manufacturer in manufacturers:
        models = manufacturer.models
        for i, first in enumerate(models):
            for second in models[i + 1:]:
                if first.overlaps(second):
                    overlaps.append((manufacturer.name, first.name, first, second))
    return overlaps


# =============================================================================
# Loading
# =============================================================================


def _option_code(option: Union[str, Dict[str, Any]]) -> str:
    """Normalize an option given as a bare string or a {code|value, label} map."""
    if isinstance(option, dict):
        code = option.get("code", option.get("value"))
        if code is None:
            raise CatalogError(f"Option without code: {option!r}")
        return str(code)
    return str(option)


def _parse_years(years: Union[int, Dict[str, Any]]) -> Tuple[int, int]:
    if isinstance(years, dict):
        return int(years["start"]), int(years["end"])
    return int(years), int(years)


def _parse_schedule_item(dct: Dict[str, Any]) -> ScheduleItem:
    drivetrains = dct.get("drivetrainSpecific")
    return ScheduleItem(
        dct["type"],
        dct["intervalMiles"],
        dct.get("intervalMonths"),
        [_option_code(d) for d in drivetrains] if drivetrains is not None else None,
        dct.get("notes"),
    )


def _parse_model(dct: Dict[str, Any]) -> Model:
    start, end = _parse_years(dct["years"])
    return Model(
        str(dct["name"]),
        start,
        end,
        [_option_code(d) for d in dct.get("drivetrains") or []],
        dct["scheduleGroup"],
    )


def _parse_manufacturer(dct: Dict[str, Any], region: Optional[str]) -> Manufacturer:
    schedules = {
        group: [_parse_schedule_item(item) for item in items or []]
        for group, items in (dct.get("schedules") or {}).items()
    }
    return Manufacturer(
        dct["name"],
        [_parse_model(m) for m in dct.get("models") or []],
        schedules,
        dct.get("region", region),
    )


def _parse_type(key: str, dct: Dict[str, Any]) -> MaintenanceTypeDef:
    return MaintenanceTypeDef(
        key,
        dct["name"],
        dct.get("description", ""),
        dct.get("category", "general"),
        Severity.parse(dct["severity"]) if dct.get("severity") else Severity.MEDIUM,
    )


def _read_yaml(filename: Path) -> Any:
    try:
        with open(filename, "rb") as fp:
            return yaml.load(fp, Loader=yaml.SafeLoader)
    except (OSError, yaml.YAMLError) as e:
        raise CatalogError(f"Cannot read {filename}: {e}") from e


def load_maintenance_types(filename: Union[str, Path]) -> MaintenanceTypeRegistry:
    """Load the maintenance type registry from a YAML file."""
    data = _read_yaml(Path(filename)) or {}
    try:
        types = [_parse_type(k, v) for k, v in (data.get("types") or {}).items()]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CatalogError(f"Malformed maintenance type in {filename}: {e!r}") from e
    return MaintenanceTypeRegistry(types)


def load_manufacturers(filename: Union[str, Path]) -> List[Manufacturer]:
    """Load one regional manufacturer file."""
    data = _read_yaml(Path(filename)) or {}
    try:
        region = data.get("region")
        return [_parse_manufacturer(m, region) for m in data.get("manufacturers") or []]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CatalogError(f"Malformed manufacturer in {filename}: {e!r}") from e


def load_catalog(directory: Optional[Union[str, Path]] = None) -> Catalog:
    """Load a catalog directory (defaults to the bundled data)."""
    root = Path(directory) if directory is not None else DATA_DIR
    types = load_maintenance_types(root / TYPES_FILE)
    manufacturers: List[Manufacturer] = []
    for path in sorted((root / MANUFACTURERS_DIR).glob("*.yaml")):
        manufacturers.extend(load_manufacturers(path))
    logger.debug(
        "Loaded catalog from %s: %d manufacturers, %d maintenance types",
        root,
        len(manufacturers),
        len(types),
    )
    return Catalog(manufacturers, types)


@lru_cache(maxsize=None)
def default_catalog() -> Catalog:
    """The bundled catalog, loaded once per process."""
    return load_catalog()
