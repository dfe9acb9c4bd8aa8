"""GET /v1/portfolio/metrics - Portfolio summary statistics"""

from fastapi import APIRouter, Depends

from scf_gateway.api.dependencies import get_service
from scf_gateway.api.v1.schemas import MetricsResponse
from scf_gateway.domain.service import SupplyChainFinancingService

router = APIRouter()


@router.get("/portfolio/metrics", response_model=MetricsResponse)
def get_metrics(service: SupplyChainFinancingService = Depends(get_service)):
    """
    Recompute portfolio metrics from current ledger state.

    Returns:
        Participant count, financed volume, average rates, default rate
        and the top participant categories by financed volume
    """
    return MetricsResponse.model_validate(service.compute_metrics())
