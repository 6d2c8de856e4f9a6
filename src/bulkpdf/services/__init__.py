"""
BulkPdf - Services Package

File registry, PDF codec adapter, operation orchestrator and session workbench.
"""

from bulkpdf.services.download import DirectorySink, MemorySink, OutputArtifact
from bulkpdf.services.file_registry import FileRegistry, InputFile, RawFile
from bulkpdf.services.orchestrator import Operation, OperationOrchestrator, OperationResult
from bulkpdf.services.workbench import StatusLevel, StatusMessage, Workbench

__all__ = [
    "DirectorySink",
    "MemorySink",
    "OutputArtifact",
    "FileRegistry",
    "InputFile",
    "RawFile",
    "Operation",
    "OperationOrchestrator",
    "OperationResult",
    "StatusLevel",
    "StatusMessage",
    "Workbench",
]
