# slot_recommender/main.py
from fastapi import FastAPI

from slot_recommender.api.routes import health, meetings
from slot_recommender.core.config import get_settings
from slot_recommender.core.logging import configure_logging
from slot_recommender.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Slot Recommender service.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Suggests and ranks meeting time slots for a group of participants,\n"
            "combining calendar availability, personal time-of-day constraints\n"
            "and meeting-type heuristics into a 0-100 score per slot."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(meetings.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
