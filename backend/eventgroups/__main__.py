"""
Run the application with uvicorn: `python -m eventgroups`.
"""

import uvicorn

from eventgroups.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "eventgroups.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        log_config=None,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
