from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taxonomy_admin.api.router import api_router
from taxonomy_admin.core.config import get_settings
from taxonomy_admin.core.log import setup_logging
from taxonomy_admin.services.workspace import TaxonomyWorkspace
from taxonomy_admin.store.factory import build_store

settings = get_settings()
logger = setup_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = await build_store(settings)
    workspace = TaxonomyWorkspace(store)
    await workspace.load()
    app.state.workspace = workspace
    logger.info("Taxonomy workspace ready (%s store)", settings.store_backend)
    try:
        yield
    finally:
        await workspace.close()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
