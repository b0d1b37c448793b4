"""Output reporters for lint results."""

from layerguard.application.reporters._base import BaseReporter
from layerguard.application.reporters.console import ConsoleConfig, ConsoleReporter
from layerguard.application.reporters.json_reporter import JsonReporter
from layerguard.application.reporters.plain_text import PlainTextReporter

__all__ = [
    "BaseReporter",
    "ConsoleConfig",
    "ConsoleReporter",
    "JsonReporter",
    "PlainTextReporter",
]
