#!/usr/bin/env python3
"""Validate manufacturer catalog files against the schema and each other."""
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import validate, ValidationError

from maintenance_tracker.catalog import DATA_DIR, MANUFACTURERS_DIR, load_catalog
from maintenance_tracker.exceptions import CatalogError


def load_schema() -> dict:
    """Load the JSON schema from catalog_schema.yaml."""
    schema_path = Path(__file__).parent / "catalog_schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_manufacturer_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single manufacturer YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def check_references(catalog_dir: Path) -> list[str]:
    """
    Cross-file checks the schema can't express.

    - every schedule item refers to a registered maintenance type
    - every model refers to an existing schedule group
    - year ranges run forward
    - no two generations of a model overlap
    """
    try:
        catalog = load_catalog(catalog_dir)
    except CatalogError as e:
        return [f"Error: {e}"]

    errors = []
    for manufacturer in catalog.list_manufacturers():
        for model in manufacturer.models:
            label = f"{manufacturer.name} {model.name} {model.year_start}-{model.year_end}"
            if model.year_start > model.year_end:
                errors.append(f"{label}: year range runs backwards")
            if model.schedule_group not in manufacturer.schedules:
                errors.append(f"{label}: unknown schedule group '{model.schedule_group}'")
        for group, items in manufacturer.schedules.items():
            for item in items:
                if item.service_type not in catalog.types:
                    errors.append(
                        f"{manufacturer.name} {group}: "
                        f"unknown maintenance type '{item.service_type}'"
                    )
    for make, name, first, second in catalog.overlaps:
        errors.append(
            f"{make} {name}: years {first.year_start}-{first.year_end} "
            f"overlap {second.year_start}-{second.year_end}"
        )
    return errors


def main(argv: Optional[List[str]] = None):
    """Validate every manufacturer file in a catalog directory."""
    args = sys.argv[1:] if argv is None else argv
    catalog_dir = Path(args[0]) if args else DATA_DIR
    manufacturers_dir = catalog_dir / MANUFACTURERS_DIR

    if not manufacturers_dir.exists():
        print(f"Error: manufacturers directory not found: {manufacturers_dir}")
        return 1

    yaml_files = sorted(manufacturers_dir.glob("*.yaml"))
    if not yaml_files:
        print(f"Warning: No YAML files found in {manufacturers_dir}")
        return 0

    schema = load_schema()
    all_valid = True
    for filepath in yaml_files:
        errors = validate_manufacturer_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    if all_valid:
        errors = check_references(catalog_dir)
        if errors:
            print("FAIL: cross-references")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print("OK: cross-references")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
