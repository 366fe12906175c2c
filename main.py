"""Launch the route distance index FastAPI server."""

import uvicorn

from route_index import load_settings


def main():
    settings = load_settings()
    # the app configures its own loggers on startup, in the serving process
    uvicorn.run(
        "route_index.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
