from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from adsgen.routers import generation, health, sessions
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)

app = FastAPI(title="Ads Generator API")

logger.info("Starting Ads Generator API application")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health.router, tags=["health"])
app.include_router(generation.router, prefix="/generate", tags=["generation"])
app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
