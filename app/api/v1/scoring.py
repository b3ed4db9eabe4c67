from fastapi import APIRouter, HTTPException, Request, status

from app.core.errors import ScoringServiceError, sanitize_error_message
from app.core.rate_limit import rate_limit
from app.schemas.feedback import FeedbackRequest, FeedbackResult
from app.schemas.messages import ScoringMessage, ScoringMessageResult
from app.schemas.scoring import KeywordsRequest, KeywordsResponse, ScoreBreakdown, ScoreRequest, WeightItem
from app.scoring.engine import get_default_engine
from app.services.scoring_service import calculate_score, extract_keywords, generate_feedback, handle_message

router = APIRouter()


def _raise_service_http_error(exc: Exception) -> None:
    if isinstance(exc, ScoringServiceError):
        raise HTTPException(status_code=exc.status_code, detail=sanitize_error_message(str(exc))) from exc
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=sanitize_error_message(str(exc))) from exc


@router.post("/score", response_model=ScoreBreakdown)
@rate_limit()
async def score_resume(request: Request, payload: ScoreRequest):
    _ = request
    try:
        return calculate_score(payload)
    except (ScoringServiceError, ValueError) as exc:
        _raise_service_http_error(exc)


@router.post("/feedback", response_model=FeedbackResult)
@rate_limit()
async def resume_feedback(request: Request, payload: FeedbackRequest):
    _ = request
    try:
        return generate_feedback(payload)
    except (ScoringServiceError, ValueError) as exc:
        _raise_service_http_error(exc)


@router.post("/keywords", response_model=KeywordsResponse)
@rate_limit()
async def keywords(request: Request, payload: KeywordsRequest):
    _ = request
    return extract_keywords(payload)


@router.get("/weights", response_model=dict[str, WeightItem])
async def scoring_weights():
    return get_default_engine().weight_justification()


@router.post("/messages", response_model=ScoringMessageResult)
@rate_limit()
async def scoring_message(request: Request, payload: ScoringMessage):
    _ = request
    return handle_message(payload)
