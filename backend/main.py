import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from api import dataset, search, theme
from config import settings
from utils.session import LookupSession
import asyncio
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logging.getLogger().setLevel(getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for searching a dictionary published from a spreadsheet as CSV",
    version="0.1.0"
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

# Include routers
app.include_router(dataset.router)
app.include_router(search.router)
app.include_router(theme.router)

# One session per process; routers reach it through app.state
app.state.session = LookupSession.from_settings(settings)
app.state.load_task = None


@app.on_event("startup")
async def startup_event():
    """Kick off the initial sheet load without blocking startup."""
    if not settings.LOAD_ON_STARTUP:
        logger.info("Initial load disabled (LOAD_ON_STARTUP=false)")
        return
    logger.info("Scheduling initial dictionary load...")
    app.state.load_task = asyncio.create_task(app.state.session.load())


@app.on_event("shutdown")
async def shutdown_event():
    """Cancel pending work on application shutdown."""
    task = app.state.load_task
    if task is not None and not task.done():
        task.cancel()
    app.state.session.close()
    logger.info("Lookup session closed")


@app.get("/")
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "version": "0.1.0",
        "status": app.state.session.state.status
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT or 8000,
        reload=settings.RELOAD,
        workers=settings.WORKERS,
    )
