"""Run the relay with uvicorn: ``python -m clue_server``."""

import uvicorn

from clue_server.core.config import settings


def main() -> None:
    uvicorn.run(
        "clue_server.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
