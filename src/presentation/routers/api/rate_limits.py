"""Rate limit rules router.

Endpoints:
    GET /api/rate-limit/rules - Active rules in match order
    PUT /api/rate-limit/rules - Replace the rule list (admin bearer token)
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from src.application.services import RateLimitService
from src.core.container import get_rate_limit_service
from src.presentation.api.middleware.auth_dependencies import require_admin
from src.schemas.observability_schemas import RateLimitRuleSchema

router = APIRouter(prefix="/rate-limit", tags=["Rate Limit"])

RateLimitServiceDep = Annotated[RateLimitService, Depends(get_rate_limit_service)]


@router.get("/rules", response_model=list[RateLimitRuleSchema])
async def list_rate_limit_rules(
    rate_limit: RateLimitServiceDep,
) -> list[RateLimitRuleSchema]:
    return [RateLimitRuleSchema.from_domain(rule) for rule in rate_limit.get_rules()]


@router.put(
    "/rules",
    response_model=list[RateLimitRuleSchema],
    dependencies=[Depends(require_admin)],
)
async def replace_rate_limit_rules(
    rate_limit: RateLimitServiceDep,
    rules: Annotated[list[RateLimitRuleSchema], Body()],
) -> list[RateLimitRuleSchema]:
    """Swap in a new rule list. First match wins, so order matters.

    Existing counters are kept; keys embed the rule path, so a changed
    pattern starts counting from zero.
    """
    rate_limit.set_rules([rule.to_domain() for rule in rules])
    return [RateLimitRuleSchema.from_domain(rule) for rule in rate_limit.get_rules()]
