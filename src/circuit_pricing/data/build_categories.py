"""
Category Builder - Aggregates the markup workbook and CSV overrides.

Produces categories.csv, the markup table read by the pricing engine:
- Configuration-driven paths
- Build report generation
- Markup validation
"""
import pandas as pd
import json
import hashlib
from datetime import datetime
from typing import Optional
from pathlib import Path

from ..config.settings import get_settings, Settings
from .store import CATEGORY_COLUMNS

WORKBOOK_SHEET = 'Categories'


def get_file_hash(path: Path) -> str:
    """Get SHA256 hash of a file."""
    if not path.exists():
        return ""
    with open(path, 'rb') as f:
        return hashlib.sha256(f.read()).hexdigest()[:12]


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    """Lowercase/strip headers, keep known columns, strip string cells."""
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(' ', '_') for c in df.columns]
    for col in CATEGORY_COLUMNS:
        if col not in df.columns:
            df[col] = ''
    df = df[CATEGORY_COLUMNS].fillna('')
    for col in CATEGORY_COLUMNS:
        df[col] = df[col].astype(str).str.strip()
    return df[df['name'] != '']


def build_category_table(settings: Optional[Settings] = None, verbose: bool = True) -> dict:
    """
    Build categories.csv from the markup workbook and override CSV.

    Args:
        settings: Optional settings override
        verbose: Print progress messages

    Returns:
        Build report dictionary
    """
    settings = settings or get_settings()

    report = {
        "timestamp": datetime.now().isoformat(),
        "status": "pending",
        "input_files": {},
        "metrics": {},
        "warnings": [],
        "errors": []
    }

    frames = []

    workbook = settings.markup_workbook
    if workbook.exists():
        report["input_files"]["markup_workbook"] = {
            "path": str(workbook),
            "hash": get_file_hash(workbook)
        }
        try:
            frames.append(_normalize(pd.read_excel(workbook, sheet_name=WORKBOOK_SHEET, dtype=str)))
            if verbose:
                print(f"Loaded {len(frames[-1])} categories from {workbook.name}")
        except (ValueError, OSError) as e:
            msg = f"ERROR: Failed to process {workbook}. {e}"
            report["errors"].append(msg)
            if verbose:
                print(msg)
    else:
        report["warnings"].append(f"WARNING: {workbook.name} not found")
        if verbose:
            print(f"WARNING: {workbook.name} not found")

    overrides = settings.category_overrides_csv
    if overrides.exists():
        report["input_files"]["category_overrides"] = {
            "path": str(overrides),
            "hash": get_file_hash(overrides)
        }
        try:
            frames.append(_normalize(pd.read_csv(overrides, dtype=str)))
            if verbose:
                print(f"Loaded {len(frames[-1])} overrides from {overrides.name}")
        except (ValueError, OSError) as e:
            msg = f"ERROR: Failed to process {overrides}. {e}"
            report["errors"].append(msg)
            if verbose:
                print(msg)

    if not frames and not report["errors"]:
        msg = "CRITICAL ERROR: no category sources found."
        report["errors"].append(msg)
        if verbose:
            print(msg)

    if report["errors"]:
        report["status"] = "failed"
        return report

    table = pd.concat(frames, ignore_index=True)
    report["metrics"]["initial_count"] = len(table)

    # Overrides come last, so keep the last row per name
    table['_key'] = table['name'].str.lower()
    duplicates = int(table['_key'].duplicated().sum())
    table = table.drop_duplicates('_key', keep='last').drop(columns='_key')
    report["metrics"]["duplicates_removed"] = duplicates
    if duplicates > 0 and verbose:
        print(f"Removed {duplicates} duplicate categories (later rows win)")

    # Validate markup
    markup = pd.to_numeric(table['minimum_markup'], errors='coerce')
    invalid = (table['minimum_markup'] != '') & (markup.isna() | (markup < 0))
    for name, raw in table.loc[invalid, ['name', 'minimum_markup']].itertuples(index=False):
        report["warnings"].append(f"Invalid minimum_markup '{raw}' for '{name}' (cleared)")
    table.loc[invalid, 'minimum_markup'] = ''

    # Blank activity flag means active
    table.loc[table['is_active'] == '', 'is_active'] = 'true'

    # Fill missing ids
    missing_ids = table['id'] == ''
    next_id = len(table) + 1
    for idx in table.index[missing_ids]:
        while f"CAT-{next_id}" in set(table['id']):
            next_id += 1
        table.at[idx, 'id'] = f"CAT-{next_id}"
        next_id += 1

    with_markup = int((pd.to_numeric(table['minimum_markup'], errors='coerce') > 0).sum())
    report["metrics"]["final_count"] = len(table)
    report["metrics"]["with_markup"] = with_markup
    report["metrics"]["invalid_markup"] = int(invalid.sum())

    output_path = settings.categories_csv
    output_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(output_path, index=False)
    report["output_file"] = str(output_path)
    report["status"] = "success"

    if verbose:
        print(f"\nPROCESS COMPLETE: {output_path} generated with {len(table)} categories "
              f"({with_markup} with markup).")

    report_path = settings.build_report
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w') as f:
        json.dump(report, f, indent=2)

    if verbose:
        print(f"Build report saved to: {report_path}")

    return report


if __name__ == "__main__":
    build_category_table()
