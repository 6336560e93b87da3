"""Chat and calculation endpoints."""

from fastapi import APIRouter

from taxadvisor.core.chat import ChatReply
from taxadvisor.core.tax import CalculationResult, calculate

from .deps import ChatOrchestratorDep, SessionStoreDep, TaxConfigDep
from .models import CalculateRequest, ChatRequest, HealthResponse

router = APIRouter(prefix="/api", tags=["advisor"])
health_router = APIRouter(tags=["health"])


@router.post("/chat", response_model=ChatReply)
async def chat(request: ChatRequest, orchestrator: ChatOrchestratorDep) -> ChatReply:
    """Answer one chat turn.

    Continues the session named by ``sessionId`` when it can be loaded,
    otherwise starts a new one.  The reply always carries a ``sessionId``
    and message id, even when the session store is unavailable.
    """
    return await orchestrator.reply(request.message, request.session_id)


@router.post("/calculate", response_model=CalculationResult)
async def calculate_endpoint(
    request: CalculateRequest, tax_config: TaxConfigDep
) -> CalculationResult:
    """Run the estimate or evaluate calculation for a submitted form."""
    return calculate(request.type, request.data, tax_config.brackets)


@health_router.get("/health", response_model=HealthResponse)
async def health(store: SessionStoreDep) -> HealthResponse:
    """Liveness plus database reachability; never fails on a dead database."""
    return HealthResponse(database=await store.ensure_healthy())
