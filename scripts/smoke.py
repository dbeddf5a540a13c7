# scripts/smoke.py
"""
Smoke Test Script for the tidyshapes pipeline.

Usage
-----
1. Test with the built-in sample dump:
    $ python scripts/smoke.py

2. Test with a local text dump, writing CSV and a figure next to it:
    $ python scripts/smoke.py --file samples/drawing.txt --export
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from tidyshapes.core.errors import TidyShapesError
from tidyshapes.pipelines.tidy_pipeline import run_pipeline

# --------------------------------------------------------------------------- #
# Environment Setup
# --------------------------------------------------------------------------- #
env_path = Path(".env")
if env_path.exists():
    load_dotenv(env_path)
    print("✅ Loaded .env file")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

# --------------------------------------------------------------------------- #
# Test Data
# --------------------------------------------------------------------------- #
# Header digits deliberately out of order: ids follow appearance, not digits.
DEFAULT_TEXT = """Line art exported from the sketch tool.
# Shape 07(0,0) , (4,0) , (4,3)
 , (0,3)
# Shape 02(1,1) , (3,1) , (2,2.5)
"""


def main() -> None:
    """Execute the smoke test workflow."""
    parser = argparse.ArgumentParser(description="Run tidyshapes Smoke Test")
    parser.add_argument("--file", "-f", type=str, help="Path to a text dump")
    parser.add_argument("--export", action="store_true", help="Write CSV and PNG next to input")
    args = parser.parse_args()

    input_data: str | Path
    out_stem = Path("artifacts") / "smoke"
    if args.file:
        input_path = Path(args.file)
        if not input_path.exists():
            print(f"❌ File not found: {input_path}")
            return
        print(f"\n📂 Using input file: {input_path}")
        input_data = input_path
        out_stem = input_path.with_suffix("")
    else:
        print("\n📝 Using built-in sample dump (No --file provided)")
        input_data = DEFAULT_TEXT

    try:
        result = run_pipeline(
            input_data,
            csv_path=out_stem.with_suffix(".csv") if args.export else None,
            figure_path=out_stem.with_suffix(".png") if args.export else None,
        )
    except TidyShapesError as exc:
        print(f"\n❌ Malformed input: {exc}")
        traceback.print_exc()
        return

    print("\n" + "=" * 60)
    print("✅ Pipeline Finished Successfully!")
    print("=" * 60)

    table = result["table"]
    print("\nshape,x,y")
    for shape, x, y in table.to_rows():
        print(f"{shape},{x:g},{y:g}")

    print("\n🕵️  Stage Log:")
    for i, snap in enumerate(result["recorder"].snapshots()):
        if snap.note:
            print(f"  {i+1}. {snap.note}")

    if result["csv_path"]:
        print(f"\n💾 CSV saved to: {result['csv_path']}")
    if result["figure_path"]:
        print(f"🖼  Figure saved to: {result['figure_path']}")


if __name__ == "__main__":
    main()
