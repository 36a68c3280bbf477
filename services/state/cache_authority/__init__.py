"""Cache Authority Service native package exports."""

from services.state.cache_authority.component import SERVICE_COMPONENT_ID
from services.state.cache_authority.domain import HealthStatus
from services.state.cache_authority.service import (
    CacheAuthorityService,
    build_cache_authority_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "CacheAuthorityService",
    "HealthStatus",
    "build_cache_authority_service",
]
