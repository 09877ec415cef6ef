"""Buccaneer — dev launcher. Starts the API server (and static client) in watch mode."""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "3001")


def main():
    parser = argparse.ArgumentParser(description="Buccaneer dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="World store directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Overwrite the world store with the demo world")
    parser.add_argument("--port", default=PORT, help=f"Server port (default: {PORT})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_dir = args.data_dir or Path(os.getenv("DATA_DIR", str(ROOT / "data")))
    if args.demo:
        from buccaneer.demo import create_demo_data
        from buccaneer.world import init_world
        create_demo_data(init_world(data_dir))

    # Build env for the server process so it picks up the same data dir
    env = os.environ.copy()
    env["DATA_DIR"] = str(data_dir.resolve())

    print(f"Starting server on http://localhost:{args.port} ...")
    proc = subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "buccaneer.app:app", "--reload",
         "--host", HOST, "--port", str(args.port),
         "--log-level", args.log_level.lower()],
        cwd=ROOT, env=env,
    )
    try:
        proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down...")
        proc.terminate()
        proc.wait()


if __name__ == "__main__":
    main()
