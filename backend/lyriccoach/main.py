from contextlib import asynccontextmanager
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lyriccoach.api import results
from lyriccoach.config import settings
from lyriccoach.core.session import ResultStore, load_demo

log = structlog.get_logger()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", env=settings.APP_ENV, version=VERSION, scoring_url=settings.SCORING_API_BASE_URL)
    if settings.DEMO_MODE:
        from lyriccoach.core.demo import demo_records
        store = app.state.results
        store.replace(load_demo(store.current, demo_records()))
        log.info("demo_results_loaded", results=len(store.current.records))
    log.info("startup_complete")
    yield
    log.info("shutdown")


app = FastAPI(
    title="Lyric Coach Analyzer",
    description="Upload songs and see whether they leave enough gaps for spoken lyric prompts",
    version=VERSION,
    lifespan=lifespan,
)
app.state.results = ResultStore()

# CORS_ORIGINS can arrive from the environment as a comma-separated string
cors_origins = settings.CORS_ORIGINS
if isinstance(cors_origins, str):
    cors_origins = [o.strip() for o in cors_origins.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(results.router, prefix="/api/v1/results", tags=["Results"])


@app.get("/health", tags=["System"])
async def health():
    return {"status": "ok", "version": VERSION, "env": settings.APP_ENV}


@app.get("/", tags=["System"])
async def root():
    return {"name": "Lyric Coach Analyzer API", "docs": "/docs", "health": "/health"}
