import asyncio
import functools

import httpx
import pytest

from exceptions import (
    AudioUnavailable,
    ConfigurationError,
    ContentBlocked,
    EmptyResponse,
    ErrorKind,
    FetchFailed,
    MalformedResponse,
)
from schemas.session import Phase
from services.coach_session import (
    AUDIO_FAILED_MESSAGE,
    CONFIGURATION_MESSAGE,
    CONTENT_BLOCKED_MESSAGE,
    GENERIC_MESSAGE,
    GEOLOCATION_DENIED_MESSAGE,
    GEOLOCATION_UNSUPPORTED_MESSAGE,
    CoachSession,
)
from services.gemini_client import client_from_env
from services.slang_fetcher import SlangReportFetcher
from tests.helpers import (
    FakePronunciationFetcher,
    FakeReportFetcher,
    RecordingHandler,
    make_report,
)


def make_session(report_fetcher=None, pronunciation_fetcher=None, **kwargs):
    kwargs.setdefault("history_seed", [])
    return CoachSession(
        report_fetcher=report_fetcher or FakeReportFetcher(),
        pronunciation_fetcher=pronunciation_fetcher or FakePronunciationFetcher(),
        **kwargs,
    )


def record_transitions(session):
    transitions = []
    session.subscribe(lambda previous, current: transitions.append((previous, current)))
    return transitions


async def test_submit_success_goes_idle_loading_ready():
    seen = {}
    fetcher = FakeReportFetcher(on_call=lambda location: seen.update(loading=session.loading))
    session = make_session(fetcher)
    transitions = record_transitions(session)

    assert await session.submit("Tokyo") is True

    assert transitions == [(Phase.IDLE, Phase.LOADING), (Phase.LOADING, Phase.READY)]
    assert seen["loading"] is True
    assert session.loading is False
    assert session.report.location == "Tokyo"
    assert session.history[0] == "Tokyo"
    assert session.error is None


@pytest.mark.parametrize(
    "error, message",
    [
        (ConfigurationError(), CONFIGURATION_MESSAGE),
        (ContentBlocked(reason="SAFETY"), CONTENT_BLOCKED_MESSAGE),
        (EmptyResponse(), GENERIC_MESSAGE),
        (MalformedResponse(), GENERIC_MESSAGE),
        (FetchFailed(), GENERIC_MESSAGE),
        (RuntimeError("bug"), GENERIC_MESSAGE),
    ],
)
async def test_submit_failure_goes_idle_loading_errored(error, message):
    session = make_session(FakeReportFetcher(result=error))
    transitions = record_transitions(session)

    await session.submit("Tokyo")

    assert transitions == [(Phase.IDLE, Phase.LOADING), (Phase.LOADING, Phase.ERRORED)]
    assert session.phase is Phase.ERRORED
    assert session.loading is False
    assert session.error == message
    assert session.report is None
    assert session.history == []


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
async def test_blank_submit_does_nothing(query):
    fetcher = FakeReportFetcher()
    session = make_session(fetcher)
    transitions = record_transitions(session)

    assert await session.submit(query) is False

    assert transitions == []
    assert session.phase is Phase.IDLE
    assert fetcher.calls == []


async def test_failure_keeps_previous_report_and_new_submit_clears_error():
    fetcher = FakeReportFetcher()
    session = make_session(fetcher)
    await session.submit("Tokyo")

    fetcher.result = FetchFailed()
    await session.submit("Osaka")
    assert session.phase is Phase.ERRORED
    assert session.report.location == "Tokyo"

    fetcher.result = None
    seen = {}
    fetcher.on_call = lambda location: seen.update(error=session.error)
    await session.submit("Osaka")
    assert seen["error"] is None
    assert session.phase is Phase.READY
    assert session.report.location == "Osaka"


async def test_new_report_replaces_old_one():
    session = make_session()
    await session.submit("Tokyo")
    await session.submit("Lagos")

    assert session.report.location == "Lagos"
    assert session.history == ["Lagos", "Tokyo"]


async def test_history_is_capped_unique_and_newest_first():
    session = make_session(history_limit=4, history_seed=["London", "Brooklyn", "Mumbai", "Sydney"])

    for location in ["Tokyo", "Lagos", "Tokyo", "Mumbai", "Paris", "Paris"]:
        await session.submit(location)
        assert len(session.history) <= 4
        assert len(set(session.history)) == len(session.history)
        assert session.history[0] == location

    assert session.history == ["Paris", "Mumbai", "Tokyo", "Lagos"]


def test_history_seed_is_deduplicated_and_capped():
    session = make_session(history_limit=2, history_seed=["A", "A", "B", "C"])

    assert session.history == ["A", "B"]


def test_default_history_seed():
    session = CoachSession(FakeReportFetcher(), FakePronunciationFetcher())

    assert session.history == ["London", "Brooklyn", "Mumbai", "Sydney"]


async def test_changing_query_keeps_report():
    session = make_session()
    await session.submit("Tokyo")

    session.set_query("Somewhere else")

    assert session.query == "Somewhere else"
    assert session.report.location == "Tokyo"
    assert session.phase is Phase.READY


async def test_missing_credential_errors_without_network(no_api_key):
    handler = RecordingHandler({})
    factory = functools.partial(client_from_env, transport=httpx.MockTransport(handler))
    session = make_session(SlangReportFetcher(client_factory=factory))

    await session.submit("Tokyo")

    assert session.phase is Phase.ERRORED
    assert session.error == CONFIGURATION_MESSAGE
    assert handler.requests == []


async def test_current_location_granted_fetches_synthetic_token():
    fetcher = FakeReportFetcher()
    session = make_session(fetcher)
    transitions = record_transitions(session)

    async def granted():
        return True

    assert await session.use_current_location(granted) is True

    assert fetcher.calls == ["My current region"]
    assert transitions == [(Phase.IDLE, Phase.LOADING), (Phase.LOADING, Phase.READY)]
    assert "My current region" not in session.history


async def test_current_location_denied_errors_without_loading():
    fetcher = FakeReportFetcher()
    session = make_session(fetcher)
    transitions = record_transitions(session)

    async def denied():
        return False

    assert await session.use_current_location(denied) is False

    assert transitions == [(Phase.IDLE, Phase.ERRORED)]
    assert session.error == GEOLOCATION_DENIED_MESSAGE
    assert fetcher.calls == []


async def test_current_location_unsupported_errors_without_loading():
    session = make_session()
    transitions = record_transitions(session)

    await session.use_current_location(None)

    assert transitions == [(Phase.IDLE, Phase.ERRORED)]
    assert session.error == GEOLOCATION_UNSUPPORTED_MESSAGE


async def test_current_location_prompt_failure_counts_as_denied():
    session = make_session()

    async def broken():
        raise RuntimeError("prompt crashed")

    await session.use_current_location(broken)

    assert session.error == GEOLOCATION_DENIED_MESSAGE


async def test_dismiss_error_returns_to_ready_or_idle():
    fetcher = FakeReportFetcher(result=FetchFailed())
    session = make_session(fetcher)
    await session.submit("Tokyo")
    session.dismiss_error()
    assert session.phase is Phase.IDLE
    assert session.error is None

    fetcher.result = None
    await session.submit("Tokyo")
    fetcher.result = FetchFailed()
    await session.submit("Osaka")
    session.dismiss_error()
    assert session.phase is Phase.READY


async def test_failing_listener_does_not_break_transitions():
    session = make_session()

    def broken(previous, current):
        raise RuntimeError("listener bug")

    session.subscribe(broken)
    await session.submit("Tokyo")

    assert session.phase is Phase.READY


async def test_unsubscribe_stops_notifications():
    session = make_session()
    transitions = []
    unsubscribe = session.subscribe(lambda p, c: transitions.append(c))
    unsubscribe()

    await session.submit("Tokyo")

    assert transitions == []


async def test_speak_returns_clip():
    audio = FakePronunciationFetcher()
    session = make_session(pronunciation_fetcher=audio)

    result = await session.speak("yabai", "among friends")

    assert result.status == "ready"
    assert result.clip.samples.tolist() == [0.0, 0.5, -0.5]
    assert audio.calls == [("yabai", "among friends")]
    assert not session.is_speaking("yabai")


async def test_speak_suppresses_reentrant_requests_per_card():
    gate = asyncio.Event()
    audio = FakePronunciationFetcher(gate=gate)
    session = make_session(pronunciation_fetcher=audio)

    first = asyncio.create_task(session.speak("yabai"))
    await asyncio.sleep(0)
    assert session.is_speaking("yabai")

    second = await session.speak("yabai")
    other = asyncio.create_task(session.speak("uzai"))
    await asyncio.sleep(0)
    gate.set()

    assert second.status == "suppressed"
    assert (await first).status == "ready"
    assert (await other).status == "ready"
    assert [call[0] for call in audio.calls] == ["yabai", "uzai"]
    assert session.snapshot().audio_in_flight == []


async def test_repeated_term_on_another_card_is_not_suppressed():
    gate = asyncio.Event()
    audio = FakePronunciationFetcher(gate=gate)
    session = make_session(pronunciation_fetcher=audio)

    first = asyncio.create_task(session.speak("yabai", card=0))
    await asyncio.sleep(0)
    repeat = asyncio.create_task(session.speak("yabai", card=3))
    await asyncio.sleep(0)

    assert session.is_speaking("yabai", 0)
    assert session.is_speaking("yabai", 3)
    assert (await session.speak("yabai", card=0)).status == "suppressed"

    gate.set()
    assert (await first).status == "ready"
    assert (await repeat).status == "ready"
    assert len(audio.calls) == 2


async def test_card_error_does_not_leak_to_same_term_elsewhere():
    session = make_session(pronunciation_fetcher=FakePronunciationFetcher(result=FetchFailed()))

    await session.speak("yabai", card=1)

    assert session.audio_error("yabai", 1) == AUDIO_FAILED_MESSAGE
    assert session.audio_error("yabai", 2) is None


async def test_speak_failure_stays_on_the_card():
    session = make_session(pronunciation_fetcher=FakePronunciationFetcher(result=AudioUnavailable()))
    await session.submit("Tokyo")
    transitions = record_transitions(session)

    result = await session.speak("yabai")

    assert result.status == "failed"
    assert result.kind is ErrorKind.AUDIO_UNAVAILABLE
    assert session.audio_error("yabai") == AUDIO_FAILED_MESSAGE
    assert transitions == []
    assert session.phase is Phase.READY
    assert session.error is None
    assert session.report.location == "Tokyo"


async def test_speak_configuration_error_uses_configuration_message():
    session = make_session(pronunciation_fetcher=FakePronunciationFetcher(result=ConfigurationError()))

    result = await session.speak("yabai")

    assert result.kind is ErrorKind.CONFIGURATION
    assert result.message == CONFIGURATION_MESSAGE


async def test_successful_retry_clears_card_error():
    audio = FakePronunciationFetcher(result=FetchFailed())
    session = make_session(pronunciation_fetcher=audio)
    await session.speak("yabai")
    assert session.audio_error("yabai")

    audio.result = None
    await session.speak("yabai")

    assert session.audio_error("yabai") is None


async def test_snapshot_reflects_state():
    session = make_session(history_seed=["London"])
    await session.submit("Tokyo")

    snapshot = session.snapshot()

    assert snapshot.phase is Phase.READY
    assert snapshot.loading is False
    assert snapshot.history == ["Tokyo", "London"]
    assert snapshot.report["location"] == "Tokyo"
    assert snapshot.report == make_report("Tokyo").to_payload()
