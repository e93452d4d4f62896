#!/usr/bin/env python3
"""Simple script to run a single resource of the application."""
import argparse

import uvicorn

FACTORIES = {
    "apiservice": "weather_app:create_api_app",
    "webfrontend": "weather_app:create_web_app",
}

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run one resource of the weather app")
    parser.add_argument("resource", choices=sorted(FACTORIES))
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    print("=" * 60)
    print(f"Starting {args.resource}")
    print(f"Server will start at: http://localhost:{args.port}")
    print("=" * 60)
    print()

    uvicorn.run(
        FACTORIES[args.resource],
        factory=True,
        host="0.0.0.0",
        port=args.port,
        reload=True,
        log_level="info"
    )
