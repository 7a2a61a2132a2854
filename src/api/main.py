from __future__ import annotations

from fastapi import FastAPI

from api.actions import config, health, search

app = FastAPI(title="docindex API")

app.include_router(health.router)
app.include_router(config.router)
app.include_router(search.router)
