"""
Verjährung Calculator Service

Computes limitation-period expiry for a norm from a knowledge date
(end-of-year rule, § 199 BGB) or an event date.
"""

import logging
import math
from datetime import date, datetime, time, timezone
from typing import List, Optional, Union

from norm_audit.config.scoring_parameters import ScoringParameters
from norm_audit.models.norms.civil_claims import VerjaehrungsResult
from norm_audit.services.norms.norm_knowledge_base import NormKnowledgeBase

logger = logging.getLogger(__name__)

DateInput = Union[str, date, datetime, None]

DEFAULT_START_EVENT = "Entstehung des Anspruchs"

HEMMUNG_HINTS: List[str] = [
    "§ 204 BGB: Klageerhebung hemmt Verjährung",
    "§ 203 BGB: Verhandlungen hemmen Verjährung",
    "§ 208 BGB: Höchstfrist 10 Jahre ab Entstehung (30 Jahre bei Leben/Körper/Freiheit)",
]

NEUBEGINN_HINTS: List[str] = [
    "§ 212 BGB: Anerkenntnis (Abschlagszahlung, Zinszahlung, Sicherheitsleistung)",
    "§ 212 BGB: Vollstreckungshandlung",
]

SECONDS_PER_DAY = 24 * 60 * 60


def parse_date(value: DateInput) -> Optional[datetime]:
    """
    Parse a date input into an aware UTC datetime

    Naive values are treated as UTC; date-only values as UTC midnight.
    Unparseable strings return None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable date input: %r", value)
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def add_years(moment: datetime, years: int) -> datetime:
    """Add calendar years, clamping Feb 29 to Feb 28."""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, day=28)


class VerjaehrungsCalculator:
    """Verjährungsberechnung"""

    def __init__(
        self,
        knowledge_base: NormKnowledgeBase,
        parameters: Optional[ScoringParameters] = None,
    ) -> None:
        self._kb = knowledge_base
        self._params = parameters or ScoringParameters()

    def calculate_verjaehrung(
        self,
        norm_id: Optional[str] = None,
        knowledge_date: DateInput = None,
        event_date: DateInput = None,
        now: Optional[datetime] = None,
    ) -> Optional[VerjaehrungsResult]:
        """
        Calculate limitation-period expiry

        Args:
            norm_id: Limitation norm (default: general 3-year norm)
            knowledge_date: Date of knowledge; expiry runs from Dec 31 of that year
            event_date: Event date; used when no knowledge date is given
            now: Reference time (default: current UTC time)

        Returns:
            VerjaehrungsResult, or None if the norm is unknown or has no period
        """
        norm = self._kb.get_norm_by_id(norm_id or self._params.general_limitation_norm_id)
        if norm is None or not norm.limitation_period_years:
            return None

        years = norm.limitation_period_years
        reference = parse_date(now) if now is not None else datetime.now(timezone.utc)

        expiry: Optional[datetime] = None
        if knowledge_date:
            knowledge = parse_date(knowledge_date)
            if knowledge is not None:
                expiry = datetime(
                    knowledge.year + years, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc
                )
        elif event_date:
            event = parse_date(event_date)
            if event is not None:
                expiry = add_years(event, years)

        is_expired = False
        days_remaining: Optional[int] = None
        if expiry is not None:
            is_expired = reference > expiry
            if is_expired:
                days_remaining = 0
            else:
                days_remaining = math.ceil((expiry - reference).total_seconds() / SECONDS_PER_DAY)

        return VerjaehrungsResult(
            norm_id=norm.id,
            paragraph=norm.citation,
            period_years=years,
            start_event=norm.limitation_start or DEFAULT_START_EVENT,
            calculated_expiry=expiry.isoformat() if expiry is not None else None,
            is_expired=is_expired,
            days_remaining=days_remaining,
            hemmung_hints=list(HEMMUNG_HINTS),
            neubeginn_hints=list(NEUBEGINN_HINTS),
        )
