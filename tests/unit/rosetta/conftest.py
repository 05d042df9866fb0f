"""Shared helpers for the Rosetta cross-language test suite."""

import json
import logging
import statistics

from stepviz.api import VisualizationResult, VisualizationStatus, visualize
from stepviz.run_types import RunConfig
from stepviz.trace_types import Trace

logger = logging.getLogger(__name__)

VISUALIZED_LANGUAGES: frozenset[str] = frozenset({"javascript", "cpp", "java"})

# Surface tokens that must never survive into a HostLang program.
SURFACE_LEFTOVERS: tuple[str, ...] = (
    "#include",
    "using namespace",
    "std::",
    "cout",
    "System.out",
    "public ",
    "static ",
    "int ",
    "void ",
    "String[]",
)


def visualize_for_language(
    language: str, source: str, max_steps: int = 5000
) -> VisualizationResult:
    """Transpile, instrument and run *source*; the run must finish cleanly."""
    logger.info("Visualizing %s program (max_steps=%d)", language, max_steps)
    result = visualize(source, language, config=RunConfig(max_steps=max_steps))
    assert (
        result.status == VisualizationStatus.OK
    ), f"[{language}] expected ok, got {result.status.value}: {result.message}"
    assert not result.trace.truncated, f"[{language}] hit the step cap of {max_steps}"
    logger.info("Visualized %s: %d steps", language, len(result.trace.steps))
    return result


def assert_clean_transpile(result: VisualizationResult, language: str) -> None:
    """No surface-language syntax is left in the HostLang program."""
    leftovers = [t for t in SURFACE_LEFTOVERS if t in result.host_source]
    assert not leftovers, f"[{language}] surface tokens left after transpiling: {leftovers}"


def extract_answer(trace: Trace, language: str, name: str = "answer") -> object:
    """Return the last snapshot of *name*."""
    values = trace.values_of(name)
    assert values, (
        f"[{language}] expected '{name}' in some captured scope, "
        f"got names: {sorted({k for s in trace.steps for k in s.scope})}"
    )
    return values[-1]


def distinct_snapshots(trace: Trace, name: str) -> list[object]:
    """Snapshots of *name* with consecutive repeats collapsed."""
    out: list[object] = []
    for value in trace.values_of(name):
        if not out or out[-1] != value:
            out.append(value)
    return out


def assert_cross_language_consistency(
    results: dict[str, VisualizationResult], *, name: str = "answer"
) -> None:
    """Run cross-language aggregate assertions."""
    assert set(results.keys()) == set(
        VISUALIZED_LANGUAGES
    ), f"Missing languages: {set(VISUALIZED_LANGUAGES) - set(results.keys())}"

    answers = {
        lang: json.dumps(extract_answer(r.trace, lang, name))
        for lang, r in results.items()
    }
    assert len(set(answers.values())) == 1, f"Final '{name}' differs: {answers}"

    counts = [len(r.trace.steps) for r in results.values()]
    median_count = statistics.median(counts)
    for lang, r in results.items():
        ratio = len(r.trace.steps) / median_count if median_count > 0 else 0
        assert ratio <= 5.0, (
            f"[{lang}] step count {len(r.trace.steps)} is {ratio:.1f}x median "
            f"({median_count:.0f}), possible runaway capture"
        )
