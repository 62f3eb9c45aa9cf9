# core/reader.py
from __future__ import annotations
import csv
import os
from typing import List


def read_csv_file(path: str) -> List[List[float]]:
    """
    Read every record of a CSV file as a list of floats.
    Blank lines are skipped; any non-numeric cell raises ValueError.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"CSV file [{path}] does not exist")

    rows: List[List[float]] = []
    with open(path, newline="") as f:
        for lineno, record in enumerate(csv.reader(f), start=1):
            if not record or all(not cell.strip() for cell in record):
                continue
            try:
                rows.append([float(cell) for cell in record])
            except ValueError as e:
                raise ValueError(f"{path}:{lineno}: {e}") from e
    return rows
