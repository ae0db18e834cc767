from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from routes import auth, profile, journal, recorder, transcribe, translate
from services.database_service import database_service
import logging
import os

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

app = FastAPI(title="Daily Voice Journal")
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.on_event("startup")
async def startup():
    database_service.ensure_schema()
    for route in app.routes:
        logger.debug(f"{route.path} → {route.name}")

# Allow the browser page to be served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/test")
async def test():
    return {"message": "App is alive"}

app.include_router(auth.router, prefix="/auth")
app.include_router(profile.router, prefix="/profile")
app.include_router(journal.router, prefix="/journal")
app.include_router(recorder.router, prefix="/recorder")
app.include_router(transcribe.router, prefix="/transcribe")
app.include_router(translate.router, prefix="/translate")

@app.get("/")
async def serve_html():
    return FileResponse(os.path.join(STATIC_DIR, "index.html"))
