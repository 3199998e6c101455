#!/usr/bin/env python
"""
Build pipeline - builds the category markup table and runs the pricing tests.

Usage:
    python scripts/build_all.py
"""
import subprocess
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from circuit_pricing.data.build_categories import build_category_table


def main():
    print("=" * 60)
    print("CIRCUIT PRICING BUILD PIPELINE")
    print("=" * 60)
    print()

    print("[1/2] Building category markup table...")
    report = build_category_table(verbose=True)

    if report["status"] != "success":
        print("\nBUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running pricing tests...")

    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests/test_golden_cases.py', 'tests/test_pricing_engine.py',
         '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\nTESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Categories: {report['metrics']['final_count']}")
    print(f"  With markup: {report['metrics']['with_markup']}")
    print(f"  Duplicates removed: {report['metrics']['duplicates_removed']}")
    print(f"  Invalid markups cleared: {report['metrics']['invalid_markup']}")
    for warning in report["warnings"]:
        print(f"  {warning}")


if __name__ == "__main__":
    main()
