import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk import __version__
from helpdesk.config.settings import settings
from helpdesk.routers import auth, user, ticket, feedback, activity
from helpdesk.utils.errors import register_error_handlers

settings.validate()

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="HR/IT Helpdesk API",
    description="Employee tickets with manager approval and HR/IT resolution",
    version=__version__,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(ticket.router)
app.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])
app.include_router(activity.router, prefix="/activity", tags=["Activity"])

@app.on_event("startup")
async def startup_event():
    logger.info("Starting Helpdesk API...")

# Root route
@app.get("/")
def read_root():
    return {"message": "HR/IT Helpdesk API"}

@app.get("/health")
def health():
    return {"status": "ok"}
