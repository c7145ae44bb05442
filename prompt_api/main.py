# ============================================================
# Prompt API — FastAPI app: /prompts CRUD + /health
# ============================================================

import logging
import os
import platform
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prompt_api.config import Settings
from prompt_api.errors import ConfigurationError, PromptApiError, StorageError
from prompt_api.routers import prompts
from prompt_api.services.store import PromptStore, build_store

APP_NAME = "Prompt API"

logger = logging.getLogger("prompt_api")

JSON_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Content-Type": "application/json",
}

meta = APIRouter(tags=["meta"])


@meta.get("/health")
def health(request: Request):
    settings: Settings = request.app.state.settings
    env = settings.env_report()
    env["python"] = platform.python_version()
    return {"ok": True, "env": env}


def _validation_details(exc: RequestValidationError):
    out = []
    for err in exc.errors():
        out.append({
            "loc": [str(p) for p in err.get("loc", ())],
            "msg": err.get("msg", ""),
        })
    return out


def create_app(settings: Optional[Settings] = None, store: Optional[PromptStore] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store
        app.state.store_error = None
        if app.state.store is None:
            try:
                app.state.store = build_store(settings)
            except ConfigurationError as e:
                logger.error(f"[CONFIG] {e.message}")
                app.state.store_error = e
        if app.state.store is not None:
            try:
                await app.state.store.startup()
            except StorageError as e:
                # il DB potrebbe tornare disponibile: le singole richieste falliranno con 500
                logger.warning(f"[STORE] startup skipped: {e.details}")
        yield
        if app.state.store is not None:
            await app.state.store.close()

    # niente redirect 307 su "/prompts/": uno slash finale finisce nel 404 catch-all
    app = FastAPI(title=APP_NAME, lifespan=lifespan, redirect_slashes=False)
    app.state.settings = settings

    # -----------------------------------------------------------
    # Preflight + header JSON/CORS su ogni risposta
    # -----------------------------------------------------------
    @app.middleware("http")
    async def json_cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=JSON_HEADERS)
        if request.method in ("POST", "PUT", "DELETE"):
            logger.info(f"[PROMPTS] {request.method} {request.url.path}")
        try:
            resp = await call_next(request)
        except Exception as e:
            logger.exception(f"[PROMPTS] unhandled error on {request.method} {request.url.path}")
            return JSONResponse(
                {"error": "Server error", "details": f"{e.__class__.__name__}: {e}"},
                status_code=500,
                headers=JSON_HEADERS,
            )
        resp.headers.update(JSON_HEADERS)
        return resp

    # -----------------------------------------------------------
    # Errori -> risposte JSON
    # -----------------------------------------------------------
    @app.exception_handler(PromptApiError)
    async def prompt_api_error(request: Request, exc: PromptApiError):
        if exc.status_code >= 500:
            logger.error(f"[PROMPTS] {request.method} {request.url.path}: {exc.message} {exc.details or ''}")
        return JSONResponse(exc.to_body(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": "Invalid request body", "details": _validation_details(exc)},
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        # rotta inesistente o metodo non previsto: sempre 404
        if exc.status_code in (404, 405):
            return JSONResponse(
                {"error": "Not found", "method": request.method, "path": request.url.path},
                status_code=404,
            )
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    # -----------------------------------------------------------
    # Rotte: radice + prefissi usati dal client (/api, Netlify)
    # -----------------------------------------------------------
    for prefix in ("",) + tuple(settings.prefixes):
        visible = prefix == ""
        app.include_router(prompts.router, prefix=prefix, include_in_schema=visible)
        app.include_router(meta, prefix=prefix, include_in_schema=visible)
        if prefix:
            # la radice della function Netlify elenca i prompt (GET /.netlify/functions/prompts)
            for root in (prefix, prefix + "/"):
                app.add_api_route(root, prompts.list_prompts, methods=["GET"], include_in_schema=False)

    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        log_level=settings.log_level.lower(),
    )
