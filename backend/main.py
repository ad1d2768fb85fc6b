import uvicorn

from gympro.core.config import settings

if __name__ == "__main__":
    # Auto-reload only while developing
    uvicorn.run(
        "gympro.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )
