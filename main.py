import logging
import uvicorn
from livents.config import get_settings


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Starting %s with %s storage", settings.service_name, settings.store_backend
    )
    # uvicorn closes the listening socket and runs shutdown on SIGINT/SIGTERM
    uvicorn.run("livents.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
