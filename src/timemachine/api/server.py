"""FastAPI application exposing history generation and reset over HTTP."""

from __future__ import annotations

import logging
import random
import threading
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import TimeMachineConfig
from ..errors import RepositoryError, RequestValidationFailure
from ..git.driver import GitDriver, RepositoryDriver
from ..history import generate_history, reset_history
from ..synth import CommitSynthesizer
from ..validation import validate_history_request

logger = logging.getLogger(__name__)


class GenerateHistoryRequest(BaseModel):
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    intensity: Any = None


def create_app(
    config: TimeMachineConfig | None = None,
    driver: RepositoryDriver | None = None,
    rng: random.Random | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Parameters
    ----------
    config:
        Runtime configuration; defaults target the current directory.
    driver:
        Repository backend. A :class:`GitDriver` for ``config.repo_path`` is
        created when omitted.
    rng:
        Random source handed to the synthesizer.

    Returns
    -------
    Configured FastAPI instance. Generation and reset requests are
    serialized through ``app.state.lock`` since both mutate the work tree.
    """

    config = config or TimeMachineConfig()
    driver = driver or GitDriver(config)
    synthesizer = CommitSynthesizer(driver, config, rng)

    app = FastAPI(title="TimeMachine", version="0.1.0")
    app.state.config = config
    app.state.driver = driver
    app.state.synthesizer = synthesizer
    app.state.lock = threading.Lock()

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected malformed request body: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Malformed request body."})

    @app.get("/health")
    def health() -> dict:
        return {"status": "healthy", "repository": driver.is_initialized()}

    @app.post("/generate-history")
    def post_generate_history(body: GenerateHistoryRequest):
        try:
            request = validate_history_request(
                body.model_dump(exclude_unset=True), config.default_intensity
            )
        except RequestValidationFailure as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

        try:
            with app.state.lock:
                result = generate_history(request, driver, synthesizer)
        except Exception:
            logger.exception("Error in /generate-history")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error occurred while generating history."},
            )
        return result.to_dict()

    @app.delete("/reset-history")
    def delete_reset_history():
        try:
            with app.state.lock:
                result = reset_history(driver)
        except RepositoryError as e:
            logger.error("Error in /reset-history: %s", e)
            return JSONResponse(status_code=500, content={"error": f"Reset failed: {e}"})
        return result.to_dict()

    return app
