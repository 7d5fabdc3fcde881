#!/usr/bin/env python3
"""
Install the project into the current interpreter and serve it with uvicorn.
Run from anywhere: python scripts/run_backend.py [--no-install]
"""

import os
import subprocess
import sys

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def main():
    if "--no-install" not in sys.argv:
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", PROJECT_DIR], check=True)

    port = os.getenv("PORT", "8000")
    print(f"Indoor Wayfinding API on http://localhost:{port} (docs at /docs)")

    try:
        subprocess.run(
            [sys.executable, "-m", "uvicorn", "main:app", "--reload", "--host", "0.0.0.0", "--port", port],
            cwd=PROJECT_DIR,
        )
    except KeyboardInterrupt:
        print("Server stopped")


if __name__ == "__main__":
    main()
