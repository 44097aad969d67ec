"""HTTP surface for the parse operation.

POST /api/parse  multipart field "file"  -> ProjectRecord JSON (camelCase)
GET  /api/health                         -> fixed liveness string
"""

import logging
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import settings
from contracts import ParseError, UnexpectedError, ValidationError
from ingestion import PlanImporter


logger = logging.getLogger(__name__)


def create_app(importer: Optional[PlanImporter] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        importer: PlanImporter to serve requests with (a default one if omitted)
    """
    importer = importer or PlanImporter()
    app = FastAPI(title=settings.service_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ValidationError)
    def handle_validation_error(request: Request, exc: ValidationError):
        logger.info("Rejected upload: %s", exc.message)
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(ParseError)
    def handle_parse_error(request: Request, exc: ParseError):
        return JSONResponse(status_code=422, content={"detail": f"Could not parse the file: {exc.message}"})

    @app.exception_handler(UnexpectedError)
    def handle_unexpected_error(request: Request, exc: UnexpectedError):
        return JSONResponse(status_code=500, content={"detail": UnexpectedError.GENERIC_MESSAGE})

    # Plain def: FastAPI runs it in the threadpool, the transformation is synchronous.
    @app.post("/api/parse")
    def parse_file(file: Optional[UploadFile] = File(None)):
        if file is None:
            raise ValidationError("No file was provided")
        data = file.file.read()
        record = importer.run(data, file.filename)
        return JSONResponse(content=record.to_wire())

    @app.get("/api/health", response_class=PlainTextResponse)
    def health():
        return f"{settings.service_name} is running"

    return app


app = create_app()
