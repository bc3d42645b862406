"""
Purpose: Load seed drivers from CSV.
What it does:
Reads a drivers CSV (see sampledata/drivers.csv) into Driver records.
Multi-valued columns (accessibility_features, languages) are ';' separated.
"""

import csv
import os
from typing import List

from .models import Driver

LIST_SEPARATOR = ";"


def _split(value: str) -> List[str]:
    return [item.strip() for item in (value or "").split(LIST_SEPARATOR) if item.strip()]


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "y")


def load_drivers_csv(filepath: str) -> List[Driver]:
    drivers = []

    with open(os.path.abspath(filepath), "r", newline="") as file:
        reader = csv.DictReader(file)
        for row in reader:
            drivers.append(
                Driver.new(
                    row["driver_id"],
                    row["name"],
                    float(row["lat"]),
                    float(row["lon"]),
                    phone=row.get("phone", ""),
                    make=row.get("make", ""),
                    model=row.get("model", ""),
                    year=int(row.get("year") or 0),
                    color=row.get("color", ""),
                    plate_number=row.get("plate_number", ""),
                    accessibility_features=_split(row.get("accessibility_features", "")),
                    rating=float(row.get("rating") or 5.0),
                    total_rides=int(row.get("total_rides") or 0),
                    is_available=_as_bool(row.get("is_available", "true")),
                    languages=_split(row.get("languages", "")),
                )
            )
    return drivers
