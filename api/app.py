"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from api.config import STATIC_DIR
from api.database import init_db
from api.routes import notifications, questions, recordings, submissions
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Placement Test API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database on startup."""
    init_db()


# Root endpoint
@app.get("/")
def index() -> FileResponse:
    """Serve frontend index.html."""
    index_path = STATIC_DIR / "index.html"
    if not index_path.exists():
        raise HTTPException(status_code=404, detail="Frontend not found")
    return FileResponse(index_path)


# Mount static files
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(questions.router)
app.include_router(submissions.router)
app.include_router(recordings.router)
app.include_router(notifications.router)
