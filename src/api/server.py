"""Run the Blog Content API with uvicorn using the configured host and port."""

from __future__ import annotations

import uvicorn

from src.api.api_config import get_api_config


def run_server(*, reload: bool = False) -> None:
    config = get_api_config()
    uvicorn.run(
        "src.api.app:app",
        host=config.host,
        port=config.port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
