from __future__ import annotations

from fastapi import FastAPI


def create_app() -> FastAPI:
    app = FastAPI(title="Window API", version="0.1.0")

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    from app.routes import window  # noqa: WPS433

    app.include_router(window.router)
    return app


app = create_app()
