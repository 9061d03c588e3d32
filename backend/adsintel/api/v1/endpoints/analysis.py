"""Analysis API endpoints.

Provides the website analysis workflow:
- POST /api/v1/analysis/analyze - Create a session and start the analysis
- GET /api/v1/analysis/sessions/{session_id} - Get a session and its results
- POST /api/v1/analysis/classify - Classify already-extracted content

Error Logging Requirements:
- Log all incoming requests with method, path, request_id
- Return structured error responses: {"error": str, "code": str, "request_id": str}
- Log 4xx errors at WARNING, 5xx at ERROR
- Include entity IDs (session_id) in all logs
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from adsintel.core.database import db_manager, get_session
from adsintel.core.logging import get_logger
from adsintel.models.analysis_session import AnalysisStatus
from adsintel.schemas.analysis import (
    AnalysisSessionResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    ClassifyRequest,
    ClassifyResponse,
    CompetitorAnalysisResponse,
    WebsiteAnalysisResponse,
)
from adsintel.schemas.targeting import TargetingRecommendationResponse
from adsintel.services.analysis_pipeline import AnalysisPipeline
from adsintel.services.analysis_session import (
    AnalysisSessionNotFoundError,
    AnalysisSessionService,
    AnalysisSessionValidationError,
)
from adsintel.services.business_model_classifier import classify_business_model
from adsintel.services.content_cache import ContentCache
from adsintel.services.content_extraction import ContentExtractor, WebsiteContent

logger = get_logger(__name__)

router = APIRouter()


def _get_request_id(request: Request) -> str:
    """Get request_id from request state."""
    return getattr(request.state, "request_id", "unknown")


def get_pipeline() -> AnalysisPipeline:
    """Pipeline bound to the application's database and content cache."""
    return AnalysisPipeline(
        db_manager.session_factory,
        extractor=ContentExtractor(cache=ContentCache()),
    )


async def _run_pipeline_background(pipeline: AnalysisPipeline, session_id: str) -> None:
    """Background task to run the analysis.

    This is executed asynchronously after the analyze endpoint returns.
    """
    try:
        final_status = await pipeline.run(session_id)
        logger.info(
            "Background analysis finished",
            extra={"session_id": session_id, "status": final_status.value},
        )
    except Exception as e:
        logger.error(
            "Background analysis failed",
            extra={
                "session_id": session_id,
                "error_type": type(e).__name__,
                "error_message": str(e),
            },
            exc_info=True,
        )


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a website analysis",
    description=(
        "Create an analysis session and run website, competitor and targeting "
        "analysis in the background. Poll the session for results."
    ),
    responses={
        400: {
            "description": "Validation error",
            "content": {
                "application/json": {
                    "example": {
                        "error": "Validation failed for 'competitor_urls': At most 5 competitor URLs are allowed",
                        "code": "VALIDATION_ERROR",
                        "request_id": "<request_id>",
                    }
                }
            },
        },
    },
)
async def analyze_website(
    request: Request,
    data: AnalyzeRequest,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalyzeResponse | JSONResponse:
    """Create a session and schedule the analysis pipeline."""
    request_id = _get_request_id(request)
    logger.debug(
        "Analyze request",
        extra={
            "request_id": request_id,
            "website_url": data.website_url[:200],
            "competitor_count": len(data.competitor_urls),
            "keyword_count": len(data.keywords),
        },
    )

    service = AnalysisSessionService(session)
    try:
        analysis_session = await service.create_session(
            website_url=data.website_url,
            user_id=data.user_id,
            target_location=data.target_location,
            competitor_urls=data.competitor_urls,
            keywords=data.keywords,
        )
    except AnalysisSessionValidationError as e:
        logger.warning(
            "Analysis session validation error",
            extra={
                "request_id": request_id,
                "field": e.field,
                "message": e.message,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": str(e),
                "code": "VALIDATION_ERROR",
                "request_id": request_id,
            },
        )

    # The pipeline runs in its own DB sessions and must see the row
    await session.commit()
    await pipeline.start(analysis_session.id)
    background_tasks.add_task(_run_pipeline_background, pipeline, analysis_session.id)

    logger.info(
        "Analysis scheduled",
        extra={"request_id": request_id, "session_id": analysis_session.id},
    )
    return AnalyzeResponse(
        session_id=analysis_session.id,
        status=AnalysisStatus.PROCESSING.value,
    )


@router.get(
    "/sessions/{session_id}",
    response_model=AnalysisSessionResponse,
    summary="Get an analysis session",
    description="Get a session; results are included once it has completed.",
    responses={
        404: {
            "description": "Session not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": "Analysis session not found: <uuid>",
                        "code": "NOT_FOUND",
                        "request_id": "<request_id>",
                    }
                }
            },
        },
    },
)
async def get_analysis_session(
    request: Request,
    session_id: str,
    session: AsyncSession = Depends(get_session),
) -> AnalysisSessionResponse | JSONResponse:
    request_id = _get_request_id(request)
    logger.debug(
        "Get analysis session request",
        extra={"request_id": request_id, "session_id": session_id},
    )

    service = AnalysisSessionService(session)
    try:
        details = await service.get_session_details(session_id)
    except AnalysisSessionNotFoundError as e:
        logger.warning(
            "Analysis session not found",
            extra={"request_id": request_id, "session_id": session_id},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "error": str(e),
                "code": "NOT_FOUND",
                "request_id": request_id,
            },
        )

    response = AnalysisSessionResponse.model_validate(details.session)
    response.website_analyses = [
        WebsiteAnalysisResponse.model_validate(row) for row in details.website_analyses
    ]
    response.competitor_analyses = [
        CompetitorAnalysisResponse.model_validate(row)
        for row in details.competitor_analyses
    ]
    response.targeting_recommendations = [
        TargetingRecommendationResponse.model_validate(row)
        for row in details.targeting_recommendations
    ]
    return response


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    summary="Classify website content",
    description=(
        "Run the rule-based business model classifier on already-extracted "
        "content. No network access and no persistence."
    ),
)
async def classify_content(
    request: Request,
    data: ClassifyRequest,
) -> ClassifyResponse:
    request_id = _get_request_id(request)
    content = WebsiteContent.from_dict(data.model_dump())
    result = classify_business_model(content)

    logger.info(
        "Content classified",
        extra={
            "request_id": request_id,
            "url": data.url[:200],
            "business_model": result.business_model.type,
            "confidence": result.confidence,
        },
    )
    return ClassifyResponse.model_validate(result.to_dict())
