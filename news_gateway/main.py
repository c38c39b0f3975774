import uvicorn

from news_gateway.core.app_factory import create_app
from news_gateway.core.config import settings

app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("news_gateway.main:app", host=settings.app.host, port=settings.app.port)
