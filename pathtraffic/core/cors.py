from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pathtraffic.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """Allow the configured browser origins to call the API."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
