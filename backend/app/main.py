# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.database import engine, Base
from app.routers import study_plans, study_sessions, study_materials, goals, profile, streaks, toasts
from app.services.exceptions import NotFound, RemoteError, Unauthenticated

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Sentry for error monitoring
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
        profiles_sample_rate=0.1,  # 10% of sampled transactions for profiling
        environment=os.getenv("ENVIRONMENT", "development"),
        enable_tracing=True,
    )

# Create database tables
Base.metadata.create_all(bind=engine)

# OpenAPI tag metadata for organized documentation
tags_metadata = [
    {
        "name": "study-plans",
        "description": "Study plans with their weeks and days.",
    },
    {
        "name": "study-sessions",
        "description": "Study sessions: create, start, complete (duration and streak tracking).",
    },
    {
        "name": "study-materials",
        "description": "Study materials and file uploads to object storage.",
    },
    {
        "name": "goals",
        "description": "Goals, milestones, notes, AI suggestion acceptance and analytics.",
    },
    {
        "name": "profile",
        "description": "User profile, preferences and onboarding.",
    },
    {
        "name": "streaks",
        "description": "Daily activity streaks.",
    },
    {
        "name": "toasts",
        "description": "Pending notifications raised by the caller's changes.",
    },
]

app = FastAPI(
    title="StudyBuddy API",
    description="""
## StudyBuddy Study Planning API

Plan what to study, track sessions and goals, and keep a daily streak.

### Features
- **Study Plans** - Week-by-week curricula with daily topics
- **Study Sessions** - Start/complete sessions with ratings and durations
- **Goals** - Milestones, notes and progress analytics
- **Materials** - Documents, images and videos in object storage

AI assistance (chat, goal suggestions, plan generation) is served by the
separate functions app, `app.functions.main:app`.
    """,
    version="1.0.0",
    openapi_tags=tags_metadata,
)

# SECURITY: Explicitly list allowed origins - no wildcards
ALLOWED_ORIGINS = [
    "http://localhost:3000",  # Frontend dev server
    "http://localhost:5173",  # Vite dev server
    "http://localhost:8080",
]

# Allow additional origins from environment (for preview deploys)
extra_origins = os.getenv("CORS_ALLOWED_ORIGINS", "")
if extra_origins:
    ALLOWED_ORIGINS.extend([o.strip() for o in extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "Accept"],
)


# Data-access errors -> HTTP
@app.exception_handler(Unauthenticated)
def unauthenticated_handler(request: Request, exc: Unauthenticated):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": str(exc)},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFound)
def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(RemoteError)
def remote_error_handler(request: Request, exc: RemoteError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})


# Include routers
app.include_router(study_plans.router)  # Plans, weeks, days
app.include_router(study_sessions.router)  # Session lifecycle
app.include_router(study_materials.router)  # Materials & uploads
app.include_router(goals.router)  # Goals & analytics
app.include_router(profile.router)  # Profile & preferences
app.include_router(streaks.router)  # Daily streaks
app.include_router(toasts.router)  # Mutation notifications


@app.get("/")
def root():
    return {
        "message": "StudyBuddy API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}
