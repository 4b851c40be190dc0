from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companies import router as companies_router
from core import errors, log, schema, settings
from core.db import Database
from leaderboard import router as leaderboard_router
from votes import router as votes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.configure_logging()
    # Initialize the DB pool once per process.
    app.state.database = await Database.connect()
    try:
        await schema.init_schema(app.state.database)
    except Exception:
        # Keep serving; store-backed routes answer 500 until the store is back.
        logger.exception("schema_init_failed")
    logger.info("api_started environment=%s", settings.environment())
    try:
        yield
    finally:
        await app.state.database.close()
        app.state.database = None


app = FastAPI(title="Inbound Voting System API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.install_handlers(app)

app.include_router(companies_router.router, tags=["companies"])
app.include_router(votes_router.router, tags=["votes"])
app.include_router(leaderboard_router.router, tags=["leaderboard"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {
        "message": "Inbound Voting System API",
        "status": "running",
        "endpoints": {
            "companies": "GET /api/companies",
            "vote": "POST /api/vote",
            "leaderboard": "GET /api/leaderboard",
            "admin": {
                "companies": (
                    "GET /api/admin/companies, POST /api/admin/companies, "
                    "DELETE /api/admin/companies/:id, PATCH /api/admin/companies/:id/activate"
                ),
                "votes": "GET /api/admin/votes",
            },
        },
    }


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host(), port=settings.port())
