"""VisualizationSession — the latest-request-wins pipeline a UI drives."""

from __future__ import annotations

import logging
from typing import Any

from . import constants
from .analyzer import StructureReport, analyze
from .api import VisualizationResult, visualize, visualize_async
from .run_types import RunConfig
from .runner import StepSink
from .trace_types import TraceStep

logger = logging.getLogger(__name__)


class VisualizationSession:
    """Holds the current structure report and trace for one editor.

    Every visualization request bumps a generation counter.  A run whose
    generation has been superseded keeps going until it ends, but its step
    callbacks are no longer forwarded and its result is discarded.
    """

    def __init__(self, config: RunConfig = RunConfig()):
        self._config = config
        self._generation = 0
        self.result: VisualizationResult | None = None
        self.report: StructureReport | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def analyze(self, source: str, language: str | None = None) -> StructureReport:
        self.report = analyze(source, language)
        return self.report

    def _begin(self, step_sink: StepSink | None) -> tuple[int, StepSink]:
        self._generation += 1
        self.result = None
        generation = self._generation

        def forward(step: TraceStep) -> Any:
            if generation != self._generation or step_sink is None:
                return None
            return step_sink(step)

        return generation, forward

    def _settle(self, generation: int, result: VisualizationResult) -> VisualizationResult | None:
        if generation != self._generation:
            logger.info("Discarding superseded visualization (generation %d)", generation)
            return None
        self.result = result
        return result

    def visualize(
        self,
        source: str,
        language: str = constants.HOST_LANGUAGE,
        step_sink: StepSink | None = None,
    ) -> VisualizationResult | None:
        """Run a visualization; returns ``None`` if a newer one superseded it."""
        generation, forward = self._begin(step_sink)
        return self._settle(generation, visualize(source, language, forward, self._config))

    async def visualize_async(
        self,
        source: str,
        language: str = constants.HOST_LANGUAGE,
        step_sink: StepSink | None = None,
    ) -> VisualizationResult | None:
        generation, forward = self._begin(step_sink)
        result = await visualize_async(source, language, forward, self._config)
        return self._settle(generation, result)
