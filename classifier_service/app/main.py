import logging
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .classifier import Classifier, build_classifier
from .config import CORS_ALLOW_HEADERS, Settings, configure_logging
from .detector import detect_fake_review
from .errors import InvalidInput, ReviewServiceError
from .models import ClassificationResult, DetectRequest, ErrorResponse

logger = logging.getLogger("ClassifierService")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or blank review text"},
    503: {"model": ErrorResponse, "description": "Classifier could not be reached"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
}


def create_app(settings: Optional[Settings] = None, classifier: Optional[Classifier] = None) -> FastAPI:
    """
    Builds the service. Settings and classifier are passed in explicitly so the
    process has no hidden toggles; both default to what the environment says.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings)
    classifier = classifier or build_classifier(settings)
    origins = settings.cors_allow_origins or ["*"]
    logger.info(f"Starting with {classifier.name} classifier")

    app = FastAPI(title="Fake Review Classifier Service")
    app.state.settings = settings
    app.state.classifier = classifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    preflight_headers = {
        "Access-Control-Allow-Origin": "*" if "*" in origins else origins[0],
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    }

    @app.exception_handler(ReviewServiceError)
    async def service_error_handler(request: Request, exc: ReviewServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        err = InvalidInput()
        return JSONResponse(status_code=err.status_code, content={"error": err.message})

    @app.options("/detect-fake-review")
    def preflight():
        # Plain OPTIONS without CORS request headers; browsers are answered by the middleware
        return Response(status_code=200, headers=preflight_headers)

    @app.post("/detect-fake-review", response_model=ClassificationResult, responses=ERROR_RESPONSES)
    def detect(req: DetectRequest):
        return detect_fake_review(req.review, classifier, settings.max_review_chars)

    @app.get("/health")
    def health():
        return {"status": "ok", "classifier": classifier.name}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("classifier_service.app.main:app", host="0.0.0.0", port=8002)
