#!/usr/bin/env python
"""
Run the Circuit Pricing API under uvicorn.

Usage:
    python scripts/run_api.py [--host 0.0.0.0] [--port 8000] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Circuit Pricing API")
    parser.add_argument('--host', default=os.environ.get('HOST', '0.0.0.0'))
    parser.add_argument('--port', default=os.environ.get('PORT', '8000'))
    parser.add_argument('--no-reload', action='store_true', help="Disable auto-reload")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    env = os.environ.copy()
    src_path = str(project_root / 'src')
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [src_path, env.get('PYTHONPATH')]))

    data_dir = Path(env.get('CIRCUIT_PRICING_DATA_DIR', project_root / 'data'))
    if not (data_dir / 'categories.csv').exists():
        print(f"WARNING: no categories.csv in {data_dir}; run scripts/build_all.py first "
              f"or agents will see carrier cost")

    cmd = [
        sys.executable, '-m', 'uvicorn', 'circuit_pricing.api.main:app',
        '--host', args.host, '--port', str(args.port),
    ]
    if not args.no_reload:
        cmd.append('--reload')

    print(f"Starting Circuit Pricing API on {args.host}:{args.port}")
    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
