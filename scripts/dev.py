#!/usr/bin/env python3
"""
Dev runner for the API server.
Usage: python scripts/dev.py
"""

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
BACKEND_PORT = int(os.environ.get("BACKEND_PORT", "3003"))


def port_in_use(port: int) -> bool:
    import socket
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("127.0.0.1", port)) == 0


def main():
    os.chdir(ROOT)
    if port_in_use(BACKEND_PORT):
        print(f"Port {BACKEND_PORT} is in use. Stop the process or set BACKEND_PORT=<port>")
        sys.exit(1)

    data_dir = os.environ.get("DATA_DIR", str(ROOT / "data"))
    print()
    print(f"  API:   http://localhost:{BACKEND_PORT}/docs")
    print(f"  Data:  {data_dir}")
    print()

    cmd = [
        sys.executable, "-m", "uvicorn", "server.app:app",
        "--reload", "--host", "0.0.0.0", "--port", str(BACKEND_PORT),
        "--log-level", os.environ.get("LOG_LEVEL", "info").lower(),
    ]
    try:
        sys.exit(subprocess.call(cmd, cwd=ROOT))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
