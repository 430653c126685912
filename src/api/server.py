#!/usr/bin/env python
"""FastAPI server for the viralcut web client."""

import sys
import uuid
from pathlib import Path

# Add src directory to Python path for imports
src_dir = Path(__file__).parent.parent
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routers import clips, core, moments
from utils.config import load_config
from utils.logging import clear_request_context, get_logger, set_request_context, setup_logging

config = load_config()
setup_logging(config["log_level"], json_output=config["log_json"])
logger = get_logger(__name__)

app = FastAPI(title=core.API_NAME, version=core.API_VERSION)

# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    set_request_context(request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(core.router)
app.include_router(moments.router)
app.include_router(clips.router)


def main() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    logger.info("Starting viralcut API", host=config["api_host"], port=config["api_port"])
    uvicorn.run(app, host=config["api_host"], port=config["api_port"], log_level=config["log_level"].lower())


if __name__ == "__main__":
    main()
