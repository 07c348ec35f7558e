"""
Run the API with uvicorn.

Usage:
    python scripts/run_server.py [--host 0.0.0.0] [--port 8000] [--reload]
"""
import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Incheon Airport status API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    uvicorn.run("icn_api.main:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
