#!/usr/bin/env python3
"""
Launch script for OwnPath Activity Backend.

Usage:
    python run_server.py [--db PATH] [--port PORT] [--host HOST]

Examples:
    python run_server.py                    # Use ./ownpath.db
    python run_server.py --db /data/op.db   # Use a custom database file
    python run_server.py --port 5000        # Run on port 5000
"""

import argparse
import os
import sys
from pathlib import Path

# Add app to path
sys.path.insert(0, str(Path(__file__).parent))


def main():
    parser = argparse.ArgumentParser(description="OwnPath Activity Backend Server")
    parser.add_argument(
        "--db",
        default="./ownpath.db",
        help="Path to the SQLite database file (default: ./ownpath.db)"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8080,
        help="Port to run server on (default: 8080)"
    )
    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for all interfaces)"
    )
    parser.add_argument(
        "--max-upload-mb",
        type=int,
        default=None,
        help="Reject uploads larger than this many MiB (default: 10)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Run in debug mode"
    )

    args = parser.parse_args()

    db_path = Path(args.db)
    if not db_path.parent.exists():
        print(f"Error: database directory does not exist: {db_path.parent}")
        sys.exit(1)

    print(f"OwnPath Activity Backend")
    print(f"=" * 40)
    print(f"Database: {db_path.absolute()}")
    print(f"Server: http://{args.host}:{args.port}")
    print(f"=" * 40)

    # Picked up by the FastAPI lifespan
    os.environ["OWNPATH_DB_PATH"] = str(db_path)
    if args.max_upload_mb is not None:
        os.environ["OWNPATH_MAX_UPLOAD_BYTES"] = str(args.max_upload_mb * 1024 * 1024)

    print("\nAPI Endpoints:")
    print("  GET  /                          - Health check")
    print("  GET  /health                    - Detailed health")
    print("  POST /api/upload                - Upload a .fit file (field: fit_file)")
    print("  GET  /api/activities            - List all activities")
    print("  GET  /api/activities/{id}       - Get activity with GPX")
    print("  GET  /api/activities/{id}/gpx   - Download GPX track")
    print("\nStarting server...")

    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="info",
    )


if __name__ == "__main__":
    main()
