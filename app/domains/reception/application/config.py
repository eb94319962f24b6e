# ============================================================================
# SCOPE: APPLICATION LAYER (Reception)
# Description: Immutable limits shared by every validation run.
# ============================================================================
"""Reception validation configuration.

Built once from application settings and injected into the engines.
"""

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from app.config.settings import Settings


@dataclass(frozen=True)
class ReceptionConfig:
    """Limits and heuristics for intake validation.

    Attributes:
        max_daily_receptions_per_doctor: Capacity per doctor per day.
        max_future_months: Furthest bookable date, in months from today.
        max_past_days: Oldest accepted date, in days before today.
        max_services: Hard limit on selected services.
        max_notes_length: Hard limit on notes length.
        working_hours_start: First working hour (inclusive).
        working_hours_end: Closing hour; only the exact hour itself is accepted.
        weekend_days: Weekdays closed for receptions (Monday=0).
        performance_future_days: Warn beyond this many days ahead.
        performance_past_days: Warn beyond this many days back.
        performance_max_services: Warn above this number of services.
        search_max_range_days: Warn when a search spans more days.
        search_max_page_size: Warn when a search page is larger.
        validation_timeout: Deadline for one orchestration run, in seconds.
    """

    max_daily_receptions_per_doctor: int = 50
    max_future_months: int = 3
    max_past_days: int = 30
    max_services: int = 10
    max_notes_length: int = 1000
    working_hours_start: int = 8
    working_hours_end: int = 20
    weekend_days: tuple[int, ...] = (4, 5)
    performance_future_days: int = 30
    performance_past_days: int = 1
    performance_max_services: int = 5
    search_max_range_days: int = 365
    search_max_page_size: int = 100
    validation_timeout: float | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "ReceptionConfig":
        return cls(
            max_daily_receptions_per_doctor=settings.RECEPTION_MAX_DAILY_RECEPTIONS_PER_DOCTOR,
            max_future_months=settings.RECEPTION_MAX_FUTURE_MONTHS,
            max_past_days=settings.RECEPTION_MAX_PAST_DAYS,
            max_services=settings.RECEPTION_MAX_SERVICES,
            max_notes_length=settings.RECEPTION_MAX_NOTES_LENGTH,
            working_hours_start=settings.RECEPTION_WORKING_HOURS_START,
            working_hours_end=settings.RECEPTION_WORKING_HOURS_END,
            weekend_days=tuple(settings.RECEPTION_WEEKEND_DAYS),
            performance_future_days=settings.RECEPTION_PERFORMANCE_FUTURE_DAYS,
            performance_past_days=settings.RECEPTION_PERFORMANCE_PAST_DAYS,
            performance_max_services=settings.RECEPTION_PERFORMANCE_MAX_SERVICES,
            search_max_range_days=settings.RECEPTION_SEARCH_MAX_RANGE_DAYS,
            search_max_page_size=settings.RECEPTION_SEARCH_MAX_PAGE_SIZE,
            validation_timeout=settings.RECEPTION_VALIDATION_TIMEOUT,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
