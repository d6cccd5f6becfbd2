from fastapi import APIRouter, Depends

from api.insights.schemas import AnalysisRequest, AnalysisResponse
from auth.dependencies import CallerContext, require_permission
from core.permissions import Permissions
from services import insight_service
from services.llm_client import LLMClient, get_llm_client
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=AnalysisResponse)
def analyze(
    data: AnalysisRequest,
    caller: CallerContext = Depends(require_permission(Permissions.INSIGHTS_ANALYZE)),
    client: LLMClient = Depends(get_llm_client),
):
    """Ask the AI gateway for an analysis of the caller's dashboard data."""
    logger.info(f"Analysis '{data.type}' requested by {caller.identity_id}")
    return AnalysisResponse(analysis=insight_service.analyze(data, client))
