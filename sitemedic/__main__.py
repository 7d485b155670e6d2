import uvicorn

from sitemedic.core.config import settings


def run():
    uvicorn.run(
        "sitemedic.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
