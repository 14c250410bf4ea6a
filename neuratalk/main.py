import json
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from neuratalk.config import get_settings
from neuratalk.models import ChatResponse, ErrorResponse
from neuratalk.relay import ChatRelay

SERVICE_NAME = "NeuraTalk"

settings = get_settings()

logger = logging.getLogger(__name__)

relay: ChatRelay | None = None


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    global relay
    current = get_settings()
    configure_logging(current.log_level)
    relay = ChatRelay(current)
    if not relay.settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; chat requests will fail until it is configured")
    yield


app = FastAPI(title=f"{SERVICE_NAME} API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})


@app.get("/")
async def health():
    return {"status": f"{SERVICE_NAME} API running"}


@app.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        # rejected by the relay as an invalid request
        payload = None
    result = await run_in_threadpool(relay.handle, payload)
    return JSONResponse(status_code=result.status_code, content=result.body)


@app.get("/config.js")
async def config_js():
    config = {"apiBaseUrl": get_settings().api_base_url}
    return Response(
        content=f"window.NEURATALK_CONFIG = {json.dumps(config)};",
        media_type="application/javascript",
    )


def run() -> None:
    import uvicorn

    configure_logging(settings.log_level)
    uvicorn.run(
        "neuratalk.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
