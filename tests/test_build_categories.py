"""
Category table build from the markup workbook and override CSV.
"""
import json

import pandas as pd

from circuit_pricing.data.build_categories import build_category_table
from circuit_pricing.services.category_service import CategoryService


OVERRIDES_CSV = """Name,Type,Minimum Markup,Is Active
Fiber Internet,Circuit,15,
Cable Broadband,Circuit,abc,true
fiber internet,Circuit,18,true
Satellite,,-5,true
,Circuit,40,true
"""


def test_no_sources_fails(empty_settings):
    report = build_category_table(empty_settings, verbose=False)

    assert report["status"] == "failed"
    assert report["errors"] == ["CRITICAL ERROR: no category sources found."]
    assert not empty_settings.categories_csv.exists()


def test_overrides_only_build(empty_settings):
    empty_settings.category_overrides_csv.write_text(OVERRIDES_CSV)
    report = build_category_table(empty_settings, verbose=False)

    assert report["status"] == "success"
    assert "WARNING: Markup Policies.xlsx not found" in report["warnings"]
    assert report["metrics"]["initial_count"] == 4
    assert report["metrics"]["duplicates_removed"] == 1
    assert report["metrics"]["final_count"] == 3
    assert report["metrics"]["invalid_markup"] == 2
    assert report["metrics"]["with_markup"] == 1

    saved = json.loads(empty_settings.build_report.read_text())
    assert saved["status"] == "success"


def test_built_table_is_readable(empty_settings):
    empty_settings.category_overrides_csv.write_text(OVERRIDES_CSV)
    build_category_table(empty_settings, verbose=False)

    categories = CategoryService(empty_settings.categories_csv).list_categories()
    by_name = {c.name: c for c in categories}

    assert set(by_name) == {"Cable Broadband", "fiber internet", "Satellite"}
    # Later rows win on duplicate names
    assert by_name["fiber internet"].minimum_markup == 18.0
    assert by_name["Cable Broadband"].minimum_markup is None
    assert by_name["Satellite"].minimum_markup is None
    assert all(c.is_active for c in categories)
    assert all(c.id and c.id.startswith("CAT-") for c in categories)
    assert len({c.id for c in categories}) == 3


def test_workbook_and_overrides_merge(empty_settings):
    workbook = pd.DataFrame([
        {"Name": "Fiber Internet", "Type": "Circuit", "Minimum Markup": 12},
        {"Name": "Managed SD-WAN", "Type": "Managed Services", "Minimum Markup": 25},
    ])
    workbook.to_excel(empty_settings.markup_workbook, sheet_name="Categories", index=False)
    empty_settings.category_overrides_csv.write_text("name,type,minimum_markup\nFiber Internet,Circuit,17\n")

    report = build_category_table(empty_settings, verbose=False)

    assert report["status"] == "success"
    assert "markup_workbook" in report["input_files"]
    assert report["metrics"]["final_count"] == 2

    table = pd.read_csv(empty_settings.categories_csv, dtype=str)
    markups = dict(zip(table["name"], table["minimum_markup"]))
    assert float(markups["Fiber Internet"]) == 17.0
    assert float(markups["Managed SD-WAN"]) == 25.0
