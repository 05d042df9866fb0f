"""Composable API functions for the stepviz pipelines.

Each function corresponds to a CLI workflow (--analyze-only, --transpile-only,
--instrumented, full visualization) but is callable programmatically without
argparse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from . import constants
from .analyzer import StructureReport, analyze
from .instrument import InstrumentedProgram, instrument
from .languages import UnsupportedLanguageError, get_language
from .run_types import RunConfig
from .runner import StepSink, run, run_async
from .trace_types import Trace
from .transpiler import transpile

logger = logging.getLogger(__name__)


class VisualizationStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class VisualizationResult:
    """Outcome of one visualization request."""

    status: VisualizationStatus
    language: str
    host_source: str = ""
    trace: Trace | None = None
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "language": self.language,
            "message": self.message,
            "trace": self.trace.to_dict() if self.trace is not None else None,
        }


def analyze_source(source: str, language: str | None = None) -> StructureReport:
    """Estimate the complexity class and declared functions of *source*.

    Args:
        source: Surface-language program text.
        language: Language id; only affects how nesting is tracked.

    Returns:
        A StructureReport. Never raises.
    """
    return analyze(source, language)


def transpile_source(source: str, language: str = constants.HOST_LANGUAGE) -> str:
    """Rewrite *source* into HostLang (identity for HostLang-native sources).

    Raises:
        UnsupportedLanguageError: if *language* has no transpile path.
    """
    return transpile(source, language)


def instrument_source(source: str, language: str = constants.HOST_LANGUAGE) -> InstrumentedProgram:
    """Transpile *source* and plan its capture points."""
    return instrument(transpile_source(source, language))


def _unsupported(source_language: str) -> VisualizationResult | None:
    try:
        spec = get_language(source_language)
    except UnsupportedLanguageError as exc:
        return VisualizationResult(
            status=VisualizationStatus.UNSUPPORTED,
            language=source_language,
            message=str(exc),
        )
    if spec.visualizable:
        return None
    return VisualizationResult(
        status=VisualizationStatus.UNSUPPORTED,
        language=source_language,
        message=constants.UNSUPPORTED_LANGUAGE_TEMPLATE.format(name=spec.name),
    )


def _result_from_trace(language: str, program: InstrumentedProgram, trace: Trace) -> VisualizationResult:
    if trace.error is not None:
        status, message = VisualizationStatus.FAILED, trace.error
    elif trace.is_empty:
        status, message = VisualizationStatus.EMPTY, constants.EMPTY_TRACE_MESSAGE
    else:
        status, message = VisualizationStatus.OK, ""
    return VisualizationResult(
        status=status,
        language=language,
        host_source=program.source,
        trace=trace,
        message=message,
    )


def visualize(
    source: str,
    language: str = constants.HOST_LANGUAGE,
    step_sink: StepSink | None = None,
    config: RunConfig = RunConfig(),
) -> VisualizationResult:
    """Transpile, instrument and run *source*, returning its trace.

    Args:
        source: Surface-language program text.
        language: Language id from the registry.
        step_sink: Optional callback invoked with each captured step.
        config: Runner configuration (step cap, scheduling).

    Returns:
        A VisualizationResult. Languages without a transpile path are
        rejected before any stage runs.
    """
    rejected = _unsupported(language)
    if rejected is not None:
        logger.info("Rejecting visualization: %s", rejected.message)
        return rejected
    logger.info("Visualizing %d bytes of %s", len(source), language)
    program = instrument_source(source, language)
    trace = run(program, step_sink=step_sink, config=config)
    return _result_from_trace(language, program, trace)


async def visualize_async(
    source: str,
    language: str = constants.HOST_LANGUAGE,
    step_sink: StepSink | None = None,
    config: RunConfig = RunConfig(),
) -> VisualizationResult:
    """Async counterpart of ``visualize``; yields to the event loop between steps."""
    rejected = _unsupported(language)
    if rejected is not None:
        logger.info("Rejecting visualization: %s", rejected.message)
        return rejected
    program = instrument_source(source, language)
    trace = await run_async(program, step_sink=step_sink, config=config)
    return _result_from_trace(language, program, trace)
