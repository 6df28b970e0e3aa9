# ABOUTME: Declares the student classification enum and its display contract.
# ABOUTME: Every consumer renders labels and colour categories from this single mapping.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict


class Classification(str, Enum):
    APPROVED = "approved"
    EXAM_TRACK = "exam_track"
    FAILED = "failed"
    PROGRESSES = "progresses"
    RETAINED = "retained"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"


class StatusColor(str, Enum):
    GREEN = "green"
    AMBER = "amber"
    RED = "red"
    BLUE = "blue"


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    color: StatusColor


STATUS_DISPLAY: Dict[Classification, StatusDisplay] = {
    Classification.APPROVED: StatusDisplay("Aprovado", StatusColor.GREEN),
    Classification.EXAM_TRACK: StatusDisplay("Em Exame", StatusColor.AMBER),
    Classification.FAILED: StatusDisplay("Reprovado", StatusColor.RED),
    Classification.PROGRESSES: StatusDisplay("Progride", StatusColor.BLUE),
    Classification.RETAINED: StatusDisplay("Retido", StatusColor.RED),
    Classification.PENDING: StatusDisplay("Pendente", StatusColor.AMBER),
    Classification.IN_PROGRESS: StatusDisplay("Em Curso", StatusColor.BLUE),
}

# rich markup styles per colour category
RICH_STYLES: Dict[StatusColor, str] = {
    StatusColor.GREEN: "green",
    StatusColor.AMBER: "yellow",
    StatusColor.RED: "red",
    StatusColor.BLUE: "blue",
}


def status_label(classification: Classification) -> str:
    return STATUS_DISPLAY[classification].label


def status_color(classification: Classification) -> StatusColor:
    return STATUS_DISPLAY[classification].color


def rich_status(classification: Classification) -> str:
    """Label wrapped in rich markup for console tables."""
    style = RICH_STYLES[status_color(classification)]
    return f"[{style}]{status_label(classification)}[/{style}]"
