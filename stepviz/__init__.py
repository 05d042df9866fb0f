"""stepviz — transpile, analyze and trace small programs one statement at a time."""

from .analyzer import ComplexityClass, StructureReport, analyze
from .api import (
    VisualizationResult,
    VisualizationStatus,
    analyze_source,
    instrument_source,
    transpile_source,
    visualize,
    visualize_async,
)
from .execution import ExecutionRequest, build_execution_request
from .instrument import InstrumentedProgram, candidate_identifiers, instrument
from .languages import UnsupportedLanguageError
from .run_types import RunConfig
from .runner import run, run_async
from .session import VisualizationSession
from .trace_types import Trace, TraceStatus, TraceStep
from .transpiler import transpile

__all__ = [
    "ComplexityClass",
    "StructureReport",
    "analyze",
    "VisualizationResult",
    "VisualizationStatus",
    "analyze_source",
    "instrument_source",
    "transpile_source",
    "visualize",
    "visualize_async",
    "ExecutionRequest",
    "build_execution_request",
    "InstrumentedProgram",
    "candidate_identifiers",
    "instrument",
    "UnsupportedLanguageError",
    "RunConfig",
    "run",
    "run_async",
    "VisualizationSession",
    "Trace",
    "TraceStatus",
    "TraceStep",
    "transpile",
]
