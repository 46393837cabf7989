import pytest

from alert_relay.integrations.models import Severity


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("critical", Severity.CRITICAL),
        ("high", Severity.HIGH),
        ("medium", Severity.MEDIUM),
        ("low", Severity.LOW),
        ("warning", Severity.OTHER),
        ("CRITICAL", Severity.OTHER),
        ("", Severity.OTHER),
        (None, Severity.OTHER),
    ],
)
def test_severity_parse(raw, expected) -> None:
    assert Severity.parse(raw) is expected


def test_severity_emoji_table() -> None:
    assert Severity.CRITICAL.emoji == "🔴"
    assert Severity.HIGH.emoji == "🟠"
    assert Severity.MEDIUM.emoji == "🟡"
    assert Severity.LOW.emoji == "🟢"
    assert Severity.OTHER.emoji == "⚪"


def test_severity_color_table() -> None:
    assert Severity.CRITICAL.color == "danger"
    assert Severity.HIGH.color == "warning"
    assert Severity.MEDIUM.color == "good"
    assert Severity.LOW.color == "good"
    assert Severity.OTHER.color == "good"


def test_unknown_severity_maps_to_white_and_good() -> None:
    severity = Severity.parse("note")
    assert (severity.emoji, severity.color) == ("⚪", "good")
