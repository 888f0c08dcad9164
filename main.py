# main.py - ASGI entry point: uvicorn main:app
from moodtracker.core.config import Settings
from moodtracker.main import configure_logging, create_app

settings = Settings.from_env()
configure_logging(settings.log_level)

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")
