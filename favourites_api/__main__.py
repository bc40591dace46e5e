"""Run the favourites API with ``python -m favourites_api``."""

import uvicorn

from favourites_api.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "favourites_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.app_env == "development",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
