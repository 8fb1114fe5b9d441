from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from blogpad.auth import cleanup_expired_sessions
from blogpad.database import SessionLocal, init_db
from blogpad.logging_config import configure_logging
from blogpad.routers import post_router, user_router
from blogpad.config import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    configure_logging(settings.log_level)
    init_db()
    db = SessionLocal()
    try:
        cleanup_expired_sessions(db)
    finally:
        db.close()
    yield


app = FastAPI(
    title="blogpad",
    description="Block editor blog backend",
    version="1.0.0",
    lifespan=lifespan
)

# Credentialed CORS needs explicit origins, "*" is rejected by browsers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Report malformed or incomplete input as 400 instead of FastAPI's 422.
    """
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(problems) or "Invalid request"},
    )


# Register routers
app.include_router(user_router.router)
app.include_router(post_router.router)


@app.get("/")
async def root():
    """
    Health check endpoint.
    """
    return {
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/api/v1")
async def api_root():
    return {"message": "blogpad API v1"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "blogpad.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
