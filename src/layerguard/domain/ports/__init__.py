"""Domain ports (interfaces for external collaborators)."""

from layerguard.domain.ports.file_system import ProjectFileSystem
from layerguard.domain.ports.reporter import ReporterProtocol
from layerguard.domain.ports.rule import RuleProtocol
from layerguard.domain.ports.source_parser import SourceParserPort

__all__ = [
    "ProjectFileSystem",
    "ReporterProtocol",
    "RuleProtocol",
    "SourceParserPort",
]
