import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from townhall.api.routes.minutes import router as minutes_router
from townhall.api.routes.schedule import router as schedule_router
from townhall.api.routes.transcription import router as transcription_router
from townhall.api.routes.workflows import router as workflows_router
from townhall.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Neighborhood Association Workspace API",
    description="Meeting minutes, annual schedule and workflow diagrams",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:8501",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transcription_router)
app.include_router(minutes_router)
app.include_router(schedule_router)
app.include_router(workflows_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
