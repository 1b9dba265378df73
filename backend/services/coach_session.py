from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Set

from conf import settings
from core.logging_config import get_logger
from exceptions import ErrorKind, LingoStreetError
from schemas.session import Phase, SessionSnapshot
from schemas.slang import SlangReport
from services.audio import AudioClip
from services.pronunciation_fetcher import PronunciationFetcher
from services.slang_fetcher import SlangReportFetcher

logger = get_logger(__name__)

CONFIGURATION_MESSAGE = (
    "API Key Error: Please check your project environment variables."
)
CONTENT_BLOCKED_MESSAGE = (
    "The coach got censored: the safety filter blocked this one. "
    "Try a broader or different location."
)
GENERIC_MESSAGE = "Coach's Error: The streets are quiet right now. Try again."
GEOLOCATION_UNSUPPORTED_MESSAGE = "Geolocation is not supported by your browser."
GEOLOCATION_DENIED_MESSAGE = "Permission denied. Enter your location manually."
AUDIO_FAILED_MESSAGE = "Couldn't catch the pronunciation. Tap to try again."

# Resolves to True when the user grants location access.
Locator = Callable[[], Awaitable[bool]]
Listener = Callable[[Phase, Phase], None]


def describe_error(exc: BaseException) -> str:
    """
    Turn any fetch failure into the single message shown in the banner.
    """
    kind = getattr(exc, "kind", None)
    if kind is ErrorKind.CONFIGURATION:
        return CONFIGURATION_MESSAGE
    if kind is ErrorKind.CONTENT_BLOCKED:
        return CONTENT_BLOCKED_MESSAGE
    return GENERIC_MESSAGE


@dataclass
class PronunciationResult:
    """
    Outcome of a speak action on one card.

    `status` is "ready" with a clip, "suppressed" when the card already had a
    request in flight, or "failed" with the error kind and a card message.
    """

    status: str
    clip: Optional[AudioClip] = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None


class CoachSession:
    """
    State controller for one LingoStreet session.

    Phases cycle Idle -> Loading -> Ready/Errored under user action; there is
    no terminal phase. The controller owns the query text, the loading flag,
    the banner error, the current report and the recency list, and is the
    only place fetch errors are caught.
    """

    def __init__(
        self,
        report_fetcher: SlangReportFetcher,
        pronunciation_fetcher: PronunciationFetcher,
        history_limit: Optional[int] = None,
        history_seed: Optional[Iterable[str]] = None,
    ) -> None:
        self.report_fetcher = report_fetcher
        self.pronunciation_fetcher = pronunciation_fetcher
        self.history_limit = history_limit or settings.HISTORY_LIMIT
        seed = settings.HISTORY_SEED if history_seed is None else history_seed
        self._history: List[str] = []
        for location in seed:
            if location not in self._history:
                self._history.append(location)
        del self._history[self.history_limit:]

        self._phase = Phase.IDLE
        self.query = ""
        self.error: Optional[str] = None
        self.report: Optional[SlangReport] = None
        self._audio_in_flight: Set[str] = set()
        self._audio_errors: Dict[str, str] = {}
        self._listeners: List[Listener] = []

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def loading(self) -> bool:
        return self._phase is Phase.LOADING

    @property
    def history(self) -> List[str]:
        return list(self._history)

    @staticmethod
    def card_key(term: str, card: Optional[int] = None) -> str:
        """
        Audio is tracked per card. Callers that know the card position pass
        it so repeated terms on different cards stay independent.
        """
        return term if card is None else f"{card}:{term}"

    def is_speaking(self, term: str, card: Optional[int] = None) -> bool:
        return self.card_key(term, card) in self._audio_in_flight

    def audio_error(self, term: str, card: Optional[int] = None) -> Optional[str]:
        return self._audio_errors.get(self.card_key(term, card))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with (previous, current) on each
        phase transition. Returns a function that unsubscribes it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, phase: Phase) -> None:
        previous, self._phase = self._phase, phase
        logger.debug(f"Session phase {previous.value} -> {phase.value}")
        for listener in list(self._listeners):
            try:
                listener(previous, phase)
            except Exception:
                logger.exception("Session listener failed")

    def _remember(self, location: str) -> None:
        if location in self._history:
            self._history.remove(location)
        self._history.insert(0, location)
        del self._history[self.history_limit:]

    def set_query(self, text: str) -> None:
        # The shown report stays untouched while the user types.
        self.query = text

    def dismiss_error(self) -> None:
        if self._phase is not Phase.ERRORED:
            self.error = None
            return
        self.error = None
        self._transition(Phase.READY if self.report else Phase.IDLE)

    def _fail(self, message: str) -> None:
        self.error = message
        self._transition(Phase.ERRORED)

    async def submit(self, query: str) -> bool:
        """
        Fetch the slang report for `query`.

        A blank query is ignored without any transition. Every fetch
        failure ends in the Errored phase with a banner message.

        Returns:
            True if a fetch was attempted.
        """
        if not query or not query.strip():
            return False
        await self._run_report(query, remember=True)
        return True

    async def use_current_location(self, locator: Optional[Locator]) -> bool:
        """
        Ask for location access and, when granted, fetch the report for the
        user's current region.

        Args:
            locator: Permission prompt, or None when geolocation is not
                supported. Unsupported or denied access goes straight to
                Errored without entering Loading.

        Returns:
            True if a fetch was attempted.
        """
        if locator is None:
            logger.info("Geolocation unsupported")
            self._fail(GEOLOCATION_UNSUPPORTED_MESSAGE)
            return False

        try:
            granted = await locator()
        except Exception as exc:
            logger.warning(f"Geolocation prompt failed: {exc!r}")
            granted = False

        if not granted:
            logger.info("Geolocation permission denied")
            self._fail(GEOLOCATION_DENIED_MESSAGE)
            return False

        await self._run_report(settings.CURRENT_LOCATION_TOKEN, remember=False)
        return True

    async def _run_report(self, location: str, remember: bool) -> None:
        self.error = None
        self._transition(Phase.LOADING)
        try:
            report = await self.report_fetcher.fetch(location)
        except LingoStreetError as exc:
            self._fail(describe_error(exc))
            return
        except Exception:
            logger.exception(f"Unexpected failure fetching report for '{location}'")
            self._fail(GENERIC_MESSAGE)
            return

        self.report = report
        if remember:
            self._remember(location)
        self._transition(Phase.READY)

    async def speak(
        self, term: str, context: str = "", card: Optional[int] = None
    ) -> PronunciationResult:
        """
        Fetch the pronunciation for one card.

        While a request for the same card is in flight, further requests are
        suppressed rather than queued. Failures are kept per card and never
        touch the phase, the banner or the report.
        """
        key = self.card_key(term, card)
        if key in self._audio_in_flight:
            logger.debug(f"Pronunciation of '{term}' already in flight")
            return PronunciationResult(status="suppressed")

        self._audio_in_flight.add(key)
        self._audio_errors.pop(key, None)
        try:
            clip = await self.pronunciation_fetcher.fetch(term, context)
        except LingoStreetError as exc:
            message = (
                describe_error(exc)
                if exc.kind in (ErrorKind.CONFIGURATION, ErrorKind.CONTENT_BLOCKED)
                else AUDIO_FAILED_MESSAGE
            )
            self._audio_errors[key] = message
            return PronunciationResult(status="failed", kind=exc.kind, message=message)
        except Exception:
            logger.exception(f"Unexpected failure fetching audio for '{term}'")
            self._audio_errors[key] = AUDIO_FAILED_MESSAGE
            return PronunciationResult(
                status="failed",
                kind=ErrorKind.FETCH_FAILED,
                message=AUDIO_FAILED_MESSAGE,
            )
        finally:
            self._audio_in_flight.discard(key)

        return PronunciationResult(status="ready", clip=clip)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            query=self.query,
            loading=self.loading,
            error=self.error,
            report=self.report.to_payload() if self.report else None,
            history=self.history,
            audio_in_flight=sorted(self._audio_in_flight),
            audio_errors=dict(self._audio_errors),
        )
