from __future__ import annotations

import argparse

import uvicorn

from .config import get_settings


def run(mode: str = "debug") -> None:
    settings = get_settings()
    uvicorn.run(
        "taskdesk.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=mode == "debug",
    )


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", choices=["debug", "prod"], default="debug")
    args = parser.parse_args()
    run(args.mode)


if __name__ == "__main__":
    main()
