import logging

from fastapi import FastAPI

from .api.error_handlers import register_error_handlers
from .api.routes_auth import router as auth_router
from .api.routes_dashboard import router as dashboard_router
from .api.routes_definitions import router as definitions_router
from .api.routes_profile import router as profile_router
from .api.routes_reactions import router as reactions_router
from .api.routes_status import router as status_router
from .config import settings
from .core.database import Base, engine, SessionLocal
from .core.seed import seed_initial_data

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
)


@app.on_event("startup")
async def startup_event():
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Seed roles and admins
    db = SessionLocal()
    try:
        seed_initial_data(db, settings.admin_emails)
    finally:
        db.close()

    logger.info("%s started (%s)", settings.app_name, settings.environment)


register_error_handlers(app)

app.include_router(status_router)
app.include_router(auth_router)
app.include_router(definitions_router)
app.include_router(reactions_router)
app.include_router(dashboard_router)
app.include_router(profile_router)
