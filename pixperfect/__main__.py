import uvicorn

from pixperfect.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "pixperfect.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
