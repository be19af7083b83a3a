import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pitchside.config import CORS_ORIGINS, LOG_LEVEL
from pitchside.database import engine, init_db
from pitchside.db_functions import ensure_promotion_procedure
from pitchside.routes import notifications, registrations, slots, waitlist

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

APP_NAME = "Pitchside Tournament API"

app = FastAPI(title=APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(waitlist.router, prefix="/api", tags=["waitlist"])
app.include_router(registrations.router, prefix="/api", tags=["registrations"])
app.include_router(slots.router, prefix="/api", tags=["slots"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])


@app.on_event("startup")
def on_startup():
    init_db()  # Imports models and creates tables
    ensure_promotion_procedure(engine)
    logger.info("%s started with %d routes", APP_NAME, len(app.routes))


@app.get("/api/health")
def health_check():
    return {"app_name": APP_NAME, "status": "healthy"}
