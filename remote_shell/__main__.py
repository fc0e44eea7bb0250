import uvicorn

from remote_shell.core.config import settings


def main() -> None:
    uvicorn.run(
        "remote_shell.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
