import logging
import os

from dailyfeed_image.api.main import app


def configure_logging() -> None:
    level = (os.getenv("DAILYFEED_LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


def main() -> None:
    import uvicorn

    configure_logging()
    host = os.getenv("DAILYFEED_HOST", "0.0.0.0")
    port = int(os.getenv("DAILYFEED_PORT", "8889"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
