import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from geoparty.config import settings
from geoparty.routers import auth, rounds, sessions

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="GeoParty",
    description="Geography guessing game with multiplayer party sessions",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(sessions.router)
app.include_router(rounds.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
