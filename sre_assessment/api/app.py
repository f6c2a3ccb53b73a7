from __future__ import annotations
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from sre_assessment.config import Settings, get_settings
from sre_assessment.core.engine import AssessmentEngine
from sre_assessment.core.errors import InvalidArgument, SubmissionNotFound
from sre_assessment.core.questionnaire import load_questionnaire
from sre_assessment.logs import configure_logging
from sre_assessment.store.database import init_database, make_engine
from .routes import router

logger = structlog.get_logger()


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Optional[sessionmaker[Session]] = None,
) -> FastAPI:
    settings = settings or get_settings()
    # a broken questionnaire stops the service here, before it accepts requests
    questionnaire = load_questionnaire(settings.questionnaire_path)
    if session_factory is None:
        session_factory = init_database(make_engine(settings.database_url))

    app = FastAPI(title=questionnaire.title, version=questionnaire.version)
    app.state.settings = settings
    app.state.assessment = AssessmentEngine(questionnaire)
    app.state.session_factory = session_factory
    app.include_router(router)

    @app.exception_handler(SubmissionNotFound)
    async def _not_found(request: Request, exc: SubmissionNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidArgument)
    async def _invalid(request: Request, exc: InvalidArgument) -> JSONResponse:
        logger.info("submission.rejected", path=request.url.path, reason=str(exc))
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    logger.info(
        "api.initialized",
        questionnaire=questionnaire.title,
        panels=len(questionnaire.panels),
        questions=questionnaire.total_questions,
    )
    return app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("api.starting", port=settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
