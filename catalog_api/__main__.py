"""
Run the API with uvicorn: `python -m catalog_api` or the `catalog-api` script.

Host and port come from HOST / PORT (default 0.0.0.0:3000).
"""

import uvicorn

from catalog_api.config import settings


def main() -> None:
    uvicorn.run(
        "catalog_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
