"""
cricsim - Ball-by-ball Cricket Simulation API
"""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cricsim.config import settings
from cricsim.database import init_db
from cricsim.api.match import router as match_router
from cricsim.api.live import router as live_router
from cricsim.api.players import router as players_router
from cricsim.api.reference import router as reference_router

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)

# Initialize FastAPI app
app = FastAPI(
    title="cricsim",
    description="Ball-by-ball cricket match simulation API",
    version="0.1.0",
)

default_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
default_origins.extend(settings.CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(match_router, prefix="/api")
app.include_router(live_router, prefix="/api")
app.include_router(players_router, prefix="/api")
app.include_router(reference_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Initialize database on startup"""
    init_db()


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "cricsim API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
