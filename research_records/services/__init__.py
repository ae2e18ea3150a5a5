"""Business logic services."""

from research_records.services import export as export_service
from research_records.services import research as research_service
from research_records.services import special_user as special_user_service
from research_records.services import stats as stats_service
from research_records.services import user as user_service

__all__ = [
    "export_service",
    "research_service",
    "special_user_service",
    "stats_service",
    "user_service",
]
