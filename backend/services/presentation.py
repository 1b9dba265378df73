"""
View models for the LingoStreet page.

Everything here is a pure function of the session: no fetching and no state
changes. The template in `templates/index.html` only reads these objects.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from conf import settings
from schemas.session import Phase
from schemas.slang import Intensity, SlangItem
from services.coach_session import CoachSession

BADGE_CLASSES: Dict[Intensity, str] = {
    Intensity.MILD: "badge badge-mild",
    Intensity.MODERATE: "badge badge-moderate",
    Intensity.SPICY: "badge badge-spicy",
    Intensity.EXTREME: "badge badge-extreme",
}
DEFAULT_BADGE_CLASS = BADGE_CLASSES[Intensity.MILD]

ADVISORY_TEXT = (
    "Street talk can be sharp. Slang marked as Extreme or Spicy should be used "
    "with extreme caution. Respect local culture and read the room before "
    "using these expressions."
)


@dataclass
class BadgeView:
    label: str
    css_class: str


@dataclass
class CardView:
    index: int
    term: str
    meaning: str
    meaning_preview: str
    badge: BadgeView
    usage_context: str
    example_sentence: str
    pronunciation: Optional[str] = None
    coach_tip: Optional[str] = None
    origin: Optional[str] = None
    literal_translation: Optional[str] = None
    speaking: bool = False
    audio_error: Optional[str] = None


@dataclass
class PageView:
    phase: Phase
    query: str
    loading: bool
    error: Optional[str]
    history: List[str]
    loading_target: str
    location: Optional[str] = None
    culture_note: Optional[str] = None
    cards: List[CardView] = field(default_factory=list)
    advisory: str = ADVISORY_TEXT

    @property
    def show_report(self) -> bool:
        return bool(self.cards) and not self.loading

    @property
    def show_empty_state(self) -> bool:
        return not self.cards and not self.loading


def badge_style(intensity: Optional[str]) -> BadgeView:
    """
    Badge for an intensity label; unknown or missing labels get the Mild
    style so a surprising model answer never breaks the page.
    """
    level = Intensity.parse(intensity)
    label = (intensity or "").strip() or Intensity.MILD.value
    if level is None:
        return BadgeView(label=label, css_class=DEFAULT_BADGE_CLASS)
    return BadgeView(label=level.value, css_class=BADGE_CLASSES[level])


def truncate(text: str, limit: Optional[int] = None) -> str:
    limit = limit or settings.MEANING_PREVIEW_LENGTH
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def build_card(index: int, item: SlangItem, session: CoachSession) -> CardView:
    return CardView(
        index=index,
        term=item.term,
        meaning=item.meaning,
        meaning_preview=truncate(item.meaning),
        badge=badge_style(item.intensity),
        usage_context=item.usage_context,
        example_sentence=item.example_sentence,
        pronunciation=item.pronunciation,
        coach_tip=item.coach_tip,
        origin=item.origin,
        literal_translation=item.literal_translation,
        speaking=session.is_speaking(item.term, index),
        audio_error=session.audio_error(item.term, index),
    )


def build_page_view(session: CoachSession) -> PageView:
    report = session.report
    cards = (
        [build_card(index, item, session) for index, item in enumerate(report.slangs)]
        if report
        else []
    )
    return PageView(
        phase=session.phase,
        query=session.query,
        loading=session.loading,
        error=session.error,
        history=session.history,
        loading_target=session.query.strip() or "the area",
        location=report.location if report else None,
        culture_note=report.culture_note if report else None,
        cards=cards,
    )
