# api.py
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..interview.catalog import QuestionCatalog, default_catalog
from ..interview.extractor import FieldExtractor, create_extractor

logger = logging.getLogger("api")

PARSE_PATH = "/api/parse-profile-update"


# Request and response models
class ParseRequest(BaseModel):
    """Request model for parsing one utterance."""
    message: Optional[str] = None
    step: Optional[str] = None
    question: Optional[str] = None


class ParseResponse(BaseModel):
    """Response model: whether the profile should be updated, and with what."""
    update: bool
    field: Optional[str] = None
    value: Optional[str] = None


def create_app(extractor: Optional[FieldExtractor] = None,
               catalog: Optional[QuestionCatalog] = None) -> FastAPI:
    """Build the extraction API around an extractor and catalog."""
    catalog = catalog or default_catalog()
    if extractor is None:
        extractor = create_extractor()

    app = FastAPI(title="Health Audit Extraction API",
                  description="Turns interview answers into profile updates")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.extractor = extractor
    app.state.catalog = catalog

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log requests and responses."""
        request_id = f"{time.time():.0f}"
        client_host = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        logger.info(f"REQ [{request_id}] {method} {path} from {client_host}")
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"ERR [{request_id}] {method} {path} failed after {process_time:.3f}s: {str(e)}",
                exc_info=True
            )
            raise
        process_time = time.time() - start_time
        logger.info(
            f"RES [{request_id}] {method} {path} completed with status {response.status_code} "
            f"in {process_time:.3f}s"
        )
        return response

    @app.post(PARSE_PATH, response_model=ParseResponse, response_model_exclude_none=True)
    def parse_profile_update(request: ParseRequest):
        """Decide whether a message answers the given step."""
        if not (request.message or "").strip() or not (request.step or "").strip():
            logger.warning("API: Missing message or step in request body")
            return JSONResponse(status_code=400, content={"error": "Missing message or step in request body"})

        step = app.state.catalog.get(request.step)
        if step is None:
            logger.info(f"API: No specific parsing task for step: {request.step}")
            return ParseResponse(update=False)

        try:
            result = app.state.extractor.extract(request.message, step, request.question)
        except Exception as e:
            logger.error(f"API: Error parsing message for step '{request.step}': {str(e)}", exc_info=True)
            return ParseResponse(update=False)

        payload = ParseResponse(**result.to_response())
        logger.info(f"API: Sending payload to frontend: {payload.model_dump(exclude_none=True)}")
        return payload

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        logger.debug("API: Health check request received")
        return {"status": "healthy"}

    return app
