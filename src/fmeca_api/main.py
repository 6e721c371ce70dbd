import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fmeca_graph import __version__
import fmeca_api.routers.graphs as graphs

DEFAULT_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


def _allowed_origins():
    # comma separated, e.g. FMECA_API_CORS_ORIGINS="https://a.org,https://b.org"
    raw = os.getenv("FMECA_API_CORS_ORIGINS")
    if not raw:
        return list(DEFAULT_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


def create_app() -> FastAPI:
    app = FastAPI(title="FMECA Graph API", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    app.include_router(graphs.router, prefix="/api")

    return app


app = create_app()
