from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        # Exact, case-sensitive match on the lowercase literal only.
        for member in (cls.CRITICAL, cls.HIGH, cls.MEDIUM, cls.LOW):
            if value == member.value:
                return member
        return cls.OTHER

    @property
    def emoji(self) -> str:
        match self:
            case Severity.CRITICAL:
                return "🔴"
            case Severity.HIGH:
                return "🟠"
            case Severity.MEDIUM:
                return "🟡"
            case Severity.LOW:
                return "🟢"
            case _:
                return "⚪"

    @property
    def color(self) -> str:
        match self:
            case Severity.CRITICAL:
                return "danger"
            case Severity.HIGH:
                return "warning"
            case _:
                return "good"


class _InboundModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AlertRule(_InboundModel):
    description: str | None = None


class AlertLocation(_InboundModel):
    path: str
    start_line: int


class AlertInstance(_InboundModel):
    rule: AlertRule
    location: AlertLocation


class CodeScanningAlert(_InboundModel):
    severity: str | None = None
    most_recent_instance: AlertInstance
    html_url: str

    @property
    def severity_level(self) -> Severity:
        return Severity.parse(self.severity)


class Repository(_InboundModel):
    full_name: str


class CodeScanningAlertEvent(_InboundModel):
    action: str
    alert: CodeScanningAlert
    repository: Repository


class SlackField(BaseModel):
    title: str
    value: str
    short: bool


class SlackAction(BaseModel):
    type: Literal["button"] = "button"
    text: str
    url: str
    style: Literal["primary", "danger"] = "primary"


class SlackAttachment(BaseModel):
    color: str
    fields: list[SlackField]
    actions: list[SlackAction]
    footer: str
    ts: float


class SlackMessage(BaseModel):
    text: str
    attachments: list[SlackAttachment]
