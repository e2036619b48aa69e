"""Unit tests for how Warden routes its log output through femtologging."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.fakes import make_event
from warden import runtime
from warden.logging import configure_logging, normalize_log_level
from warden.moderation import ModerationEventLogger, MutationError, Spam
from warden.moderation import observability as moderation_observability

type LogCall = tuple[str, str, object | None]


class _RecordingLogger:
    """Stand-in for a femtologging logger that keeps every call."""

    def __init__(self) -> None:
        self.calls: list[LogCall] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        assert stack_info is False, "Warden never requests stack info."
        self.calls.append((level, message, exc_info))
        return message


@pytest.fixture
def basic_config_calls(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, object]]:
    """Replace ``basicConfig`` and return the keyword arguments it receives."""
    calls: list[dict[str, object]] = []
    monkeypatch.setattr(
        "warden.logging.basicConfig", lambda **kwargs: calls.append(kwargs)
    )
    return calls


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("trace", ("TRACE", False)),
        ("Warn", ("WARN", False)),
        ("\tERROR\n", ("ERROR", False)),
        ("verbose", ("INFO", True)),
        ("   ", ("INFO", True)),
        (None, ("INFO", True)),
    ],
)
def test_warden_log_level_values(
    raw: str | None, expected: tuple[str, bool]
) -> None:
    """``WARDEN_LOG_LEVEL`` accepts any casing and flags unknown names."""
    assert normalize_log_level(raw) == expected


def test_configure_logging_keeps_existing_handlers_by_default(
    basic_config_calls: list[dict[str, object]],
) -> None:
    """Only ``force=True`` asks femtologging to replace handlers."""
    configure_logging("debug")
    configure_logging("error", force=True)

    assert basic_config_calls == [
        {"level": "DEBUG", "force": False},
        {"level": "ERROR", "force": True},
    ]


class TestRuntimeLogLevel:
    """How ``runtime.main`` applies ``WARDEN_LOG_LEVEL``."""

    @pytest.fixture
    def runtime_logger(
        self,
        monkeypatch: pytest.MonkeyPatch,
        basic_config_calls: list[dict[str, object]],
    ) -> _RecordingLogger:
        """Stub the server and capture the runtime module's log calls."""
        del basic_config_calls

        class _IdleGranian:
            def __init__(self, target: str, **kwargs: typ.Any) -> None:  # noqa: ANN401
                del target, kwargs

            def serve(self) -> None:
                pass

        recording = _RecordingLogger()
        monkeypatch.setattr("granian.Granian", _IdleGranian)
        monkeypatch.setattr(runtime, "logger", recording)
        monkeypatch.setenv("WARDEN_HOST", "127.0.0.1")
        monkeypatch.setenv("WARDEN_PORT", "8081")
        return recording

    def test_unknown_level_warns_and_falls_back(
        self,
        monkeypatch: pytest.MonkeyPatch,
        runtime_logger: _RecordingLogger,
        basic_config_calls: list[dict[str, object]],
    ) -> None:
        """An unknown level is reported after INFO logging is configured."""
        monkeypatch.setenv("WARDEN_LOG_LEVEL", "chatty")

        runtime.main()

        assert basic_config_calls == [{"level": "INFO", "force": False}]
        assert runtime_logger.calls == [
            (
                "WARNING",
                "Invalid WARDEN_LOG_LEVEL 'chatty', falling back to INFO",
                None,
            ),
            (
                "INFO",
                "Starting Warden runtime on 127.0.0.1:8081 (log_level=INFO)",
                None,
            ),
        ]

    def test_known_level_is_applied_silently(
        self,
        monkeypatch: pytest.MonkeyPatch,
        runtime_logger: _RecordingLogger,
        basic_config_calls: list[dict[str, object]],
    ) -> None:
        """A valid level reaches femtologging and no warning is logged."""
        monkeypatch.setenv("WARDEN_LOG_LEVEL", " debug ")

        runtime.main()

        assert basic_config_calls == [{"level": "DEBUG", "force": False}]
        assert [level for level, _, _ in runtime_logger.calls] == ["INFO"]
        assert runtime_logger.calls[0][1].endswith("(log_level=DEBUG)")


class TestModerationMessageShapes:
    """Moderation events render as ``[moderation.*] key=value`` lines."""

    @pytest.fixture
    def moderation_logger(self, monkeypatch: pytest.MonkeyPatch) -> _RecordingLogger:
        """Capture calls made by the moderation observability module."""
        recording = _RecordingLogger()
        monkeypatch.setattr(moderation_observability, "logger", recording)
        return recording

    def test_spam_verdict_line(self, moderation_logger: _RecordingLogger) -> None:
        """Spam verdicts carry the item, kind, author and reason."""
        ModerationEventLogger().log_verdict(make_event(), Spam("Too many links."))

        assert moderation_logger.calls == [
            (
                "INFO",
                "[moderation.verdict.spam] item=acme/widgets#7 kind=issues.opened "
                "author=octocat reason=Too many links.",
                None,
            )
        ]

    def test_template_score_line(self, moderation_logger: _RecordingLogger) -> None:
        """Template scores are DEBUG lines with an integer percentage."""
        ModerationEventLogger().log_template_scored(make_event(number=12), 95)

        assert moderation_logger.calls == [
            (
                "DEBUG",
                "[moderation.template.scored] item=acme/widgets#12 similarity_pct=95",
                None,
            )
        ]

    def test_remediation_failure_keeps_exception(
        self, moderation_logger: _RecordingLogger
    ) -> None:
        """Failed required actions are ERROR lines that carry the exception."""
        error = MutationError.failed("close", "HTTP 403")

        ModerationEventLogger().log_remediation_failed(
            make_event(), action="close", error=error
        )

        [(level, message, exc_info)] = moderation_logger.calls
        assert level == "ERROR"
        assert message.startswith(
            "[moderation.remediation.failed] item=acme/widgets#7 action=close "
            "error_type=MutationError"
        )
        assert exc_info is error
