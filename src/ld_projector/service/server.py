from __future__ import annotations

import uvicorn

from ld_projector.logging_config import configure_logging
from ld_projector.settings import settings

from .app import create_app


def main() -> None:
    configure_logging()
    uvicorn.run(
        create_app(),
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
        loop="uvloop",
        http="httptools",
    )


if __name__ == "__main__":
    main()
