#!/usr/bin/env python
"""
Run the Streamlit carrier pricing viewer.

Usage:
    python scripts/run_app.py [--port 8501]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Carrier pricing viewer")
    parser.add_argument('--port', default=os.environ.get('STREAMLIT_PORT', '8501'))
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    viewer = project_root / 'src' / 'circuit_pricing' / 'ui' / 'app_streamlit.py'
    if not viewer.exists():
        print(f"ERROR: viewer not found at {viewer}")
        sys.exit(1)

    data_dir = Path(os.environ.get('CIRCUIT_PRICING_DATA_DIR', project_root / 'data'))
    if not (data_dir / 'carrier_quotes.csv').exists():
        print(f"WARNING: no carrier_quotes.csv in {data_dir}; the viewer will be empty")

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(viewer), '--server.port', str(args.port)]
    print(f"Starting viewer: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nViewer stopped.")


if __name__ == "__main__":
    main()
