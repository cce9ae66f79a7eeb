"""Run the API server: ``python -m infolayer_api``."""

import uvicorn

from infolayer_api.config import settings


def main() -> None:
    uvicorn.run(
        "infolayer_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
