from contextlib import asynccontextmanager
from typing import Annotated, Any, Callable, Dict

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .canonical import decide_redirect
from .config import Settings, get_settings
from .db_connection import DocumentStore, SQLiteDocumentStore, check_database_exists
from .field_aliases import DEFAULT_TABLE
from .logging_config import get_logger, setup_logging
from .models import DetailResponse, ProfileModel, RecordModel, RedirectModel
from .profiles import EntityProfile, all_profiles
from .resolver import Resolver, SlugIndexCache

settings = get_settings()
setup_logging(settings.log_level, use_colours=settings.log_colours)
logger = get_logger(__name__)

#shared by every request so generated-slug lookups scan a collection once per change
slug_indexes = SlugIndexCache(max_entries=settings.slug_index_cache_size)


@asynccontextmanager
async def lifespan(app: FastAPI):
    check_database_exists(get_settings().db_path)
    yield


app = FastAPI(title="Directory Resolution API", version="0.2.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"]
)


def get_store() -> DocumentStore:
    return SQLiteDocumentStore(get_settings().db_path)


def json_response(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=content,
        status_code=status_code,
        media_type="application/json; charset=utf-8",
        headers={"Cache-Control": "no-store"},
    )


@app.get("/")
def manifest() -> JSONResponse:
    payload = {
        "name": "Directory identifier resolution",
        "aliasTableVersion": DEFAULT_TABLE.version,
        "profiles": [
            ProfileModel(
                key=p.key,
                kind=p.kind,
                route=f"{p.route_prefix}/{{identifier}}",
                collections=list(p.collections),
            ).model_dump()
            for p in all_profiles()
        ],
    }
    return json_response(payload)


@app.get("/healthy")
def health() -> JSONResponse:
    return json_response({"status": "ok"})


def detail_endpoint(profile: EntityProfile) -> Callable:
    async def detail(
        identifier: str,
        store: Annotated[DocumentStore, Depends(get_store)],
        config: Annotated[Settings, Depends(get_settings)],
    ) -> JSONResponse:
        resolver = Resolver(
            store,
            profile,
            use_slug_index=config.slug_index,
            index_cache=slug_indexes,
        )
        record = await resolver.resolve(identifier)

        #not found is an expected outcome, the front end renders its own view
        if record is None:
            return json_response({"detail": f"{profile.kind.capitalize()} not found"}, status_code=404)

        decision = decide_redirect(identifier, record, profile, config.raw_id_pattern)
        payload = DetailResponse(
            record=RecordModel.from_record(record),
            redirect=RedirectModel.from_decision(decision, config.base_url),
        )
        return json_response(payload.model_dump(mode="json"))

    detail.__name__ = f"{profile.key.replace('-', '_')}_detail"
    return detail


for _profile in all_profiles():
    app.add_api_route(
        f"{_profile.route_prefix}/{{identifier}}",
        detail_endpoint(_profile),
        methods=["GET"],
        name=f"{_profile.key}_detail",
    )


#https://fastapi.tiangolo.com/tutorial/dependencies/
#https://fastapi.tiangolo.com/advanced/testing-dependencies/
#https://fastapi.tiangolo.com/advanced/response-directly/
