import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from interpretreflect.db import init_db
from interpretreflect.api.reflections import router as reflections_router
from interpretreflect.api.stress_resets import router as stress_resets_router
from interpretreflect.api.wellness_metrics import router as wellness_metrics_router
from interpretreflect.settings import cors_origins

load_dotenv()
logger = logging.getLogger(__name__)

try:
    init_db()
except Exception as exc:  # pragma: no cover - outbox database may start after the API
    logger.warning("API startup continuing without immediate DB init: %s", exc)

app = FastAPI(title="InterpretReflect API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(reflections_router)
app.include_router(stress_resets_router)
app.include_router(wellness_metrics_router)
