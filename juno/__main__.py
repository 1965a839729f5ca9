"""Run the Juno backend with uvicorn: ``python -m juno``."""

from __future__ import annotations

import uvicorn

from juno.config.settings import JunoSettings
from juno.main import create_app


def main() -> None:
    settings = JunoSettings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
