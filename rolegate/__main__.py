"""
Run the server:

  python -m rolegate

HOST, PORT and the rest of the settings come from the environment or .env.
"""

import logging

import uvicorn
from dotenv import load_dotenv

from rolegate.core.config import get_settings


def main() -> None:
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    logging.getLogger(__name__).info("Starting server on http://%s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "rolegate.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
