# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import os
import logging
import sentry_sdk
from fastapi import FastAPI

from app.functions import handlers

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
        traces_sample_rate=0.1,
        environment=os.getenv("ENVIRONMENT", "development"),
    )

# Deployed apart from the main API: these endpoints answer any origin and
# must not sit behind its CORS allow-list.
app = FastAPI(
    title="StudyBuddy AI Functions",
    description="Stateless proxies to the language-model provider: assistant chat, goal suggestions, study plan generation.",
    version="1.0.0",
)

app.include_router(handlers.router)


@app.get("/health")
def health_check():
    return {"status": "healthy"}
