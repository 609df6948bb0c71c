"""FastAPI application for the Privacy Gap Scheduler API."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routers import gaps

VERSION = "0.1.0"

# Create FastAPI app
app = FastAPI(
    title="Privacy Gap Scheduler API",
    description="""
    REST API over the deterministic daily privacy gap generator.

    Provides access to:
    - Per-subject daily gap schedules
    - In-gap status and time to the next gap
    - Schedule generation with an inline config
    """,
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Configure CORS for the dashboard frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gaps.router, prefix="/api")


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/")
def root():
    """Root endpoint - redirect to docs."""
    return {
        "message": "Privacy Gap Scheduler API",
        "docs": "/api/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
