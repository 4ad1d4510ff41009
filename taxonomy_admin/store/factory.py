from taxonomy_admin.core.config import Settings
from taxonomy_admin.core.db import create_engine, create_session_maker, init_db
from taxonomy_admin.store.base import RemoteStore, StoreNotConfiguredError
from taxonomy_admin.store.rest_store import RestStore
from taxonomy_admin.store.sql_store import SqlStore


async def build_store(settings: Settings) -> RemoteStore:
    backend = settings.store_backend.lower().strip()

    if backend == "sql":
        engine = create_engine(settings.database_url)
        await init_db(engine)
        return SqlStore(create_session_maker(engine), engine=engine)
    if backend == "rest":
        if not settings.store_url:
            raise StoreNotConfiguredError(
                "Remote store URL is missing. Set STORE_URL in backend .env."
            )
        if not settings.store_api_key:
            raise StoreNotConfiguredError(
                "Remote store API key is missing. Set STORE_API_KEY in backend .env."
            )
        return RestStore(
            settings.store_url,
            settings.store_api_key,
            schema=settings.store_schema,
            table_names=settings.table_names,
            timeout_seconds=settings.store_timeout_seconds,
        )
    raise StoreNotConfiguredError(f"Unsupported store backend '{settings.store_backend}'")
