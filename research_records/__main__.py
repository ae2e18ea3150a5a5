"""Run the API with uvicorn: ``python -m research_records`` or ``research-records``."""

import uvicorn

from research_records.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "research_records.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        proxy_headers=True,
        log_config=None,
    )


if __name__ == "__main__":
    main()
