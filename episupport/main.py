# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from episupport.config import LOG_LEVEL
from episupport.database import database
from episupport.models import models  # noqa: F401  (registers tables on Base.metadata)
from episupport.routers import auth, profile, medications, support, seizures

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ---------------- Lifespan context ----------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Creates all tables on startup and logs the registered routes.
    """
    database.Base.metadata.create_all(bind=database.engine)

    logger.info("📌 ROUTES REGISTERED:")
    for route in app.routes:
        if isinstance(route, APIRoute):
            methods = ",".join(sorted(route.methods))
            logger.info("%-10s -> %s", methods, route.path)

    yield

# ---------------- FastAPI instance ----------------
app = FastAPI(title="Epilepsy Support API", lifespan=lifespan)

# ---------------- Error handling ----------------
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# ---------------- Include routers ----------------
app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(medications.router)
app.include_router(support.router)
app.include_router(seizures.router)

# ---------------- Health ----------------
@app.get("/ping", tags=["Health"])
def ping():
    return {"status": "ok"}
