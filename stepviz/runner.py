"""Trace Runner — pulls steps from a HostInterpreter and records them as a Trace.

The runner never raises past its boundary: program errors and evaluator
defects alike end the run and become ``Trace.error``, with every step captured
before the failure kept.

The evaluator nests Python frames for every HostLang call, so the step
stream is advanced on a dedicated worker thread with a large stack while
the interpreter recursion limit is raised for the duration of the run.
Sinks are still invoked on the caller's thread.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from . import constants
from .host.errors import HostError
from .host.interpreter import HostInterpreter
from .instrument import InstrumentedProgram
from .run_types import RunConfig, RunStats
from .trace_types import Trace, TraceStep

logger = logging.getLogger(__name__)

StepSink = Callable[[TraceStep], Any]

_DEFAULT_CONFIG = RunConfig()

_limit_lock = threading.Lock()
_active_runs = 0
_saved_limit = 0


class _TraceCollector:
    """Accumulates steps and the failure line for one run."""

    def __init__(self, config: RunConfig):
        self._config = config
        self._started = time.perf_counter()
        self.steps: list[TraceStep] = []
        self.error: str | None = None
        self.truncated = False

    def accept(self, step: TraceStep) -> bool:
        """Record *step*; returns False, recording nothing, once the cap is full."""
        if self._config.max_steps is not None and len(self.steps) >= self._config.max_steps:
            logger.info("Step cap of %d reached, stopping run", self._config.max_steps)
            self.truncated = True
            return False
        self.steps.append(step)
        return True

    def fail(self, message: str):
        self.error = f"{constants.SIMULATION_ERROR_PREFIX}{message}"
        logger.warning(self.error)

    def finish(self) -> Trace:
        stats = RunStats(steps=len(self.steps), elapsed=time.perf_counter() - self._started)
        if not self.steps and self.error is None:
            logger.info(constants.EMPTY_TRACE_MESSAGE)
        logger.info("Run finished: %d steps in %.3fs", stats.steps, stats.elapsed)
        return Trace(steps=self.steps, error=self.error, truncated=self.truncated, stats=stats)


@contextmanager
def _contained(collector: _TraceCollector) -> Iterator[None]:
    try:
        yield
    except HostError as error:
        collector.fail(error.describe())
    except RecursionError:
        collector.fail("RangeError: Maximum call stack size exceeded")
    except Exception as error:
        logger.exception("Evaluator failure")
        collector.fail(f"InternalError: {error}")


@contextmanager
def _recursion_headroom() -> Iterator[None]:
    """Raise the recursion limit while any run is active, then restore it."""
    global _active_runs, _saved_limit
    with _limit_lock:
        if _active_runs == 0:
            _saved_limit = sys.getrecursionlimit()
            if _saved_limit < constants.HOST_RECURSION_LIMIT:
                sys.setrecursionlimit(constants.HOST_RECURSION_LIMIT)
        _active_runs += 1
    try:
        yield
    finally:
        with _limit_lock:
            _active_runs -= 1
            if _active_runs == 0:
                sys.setrecursionlimit(_saved_limit)


def _deep_stack_executor() -> ThreadPoolExecutor:
    """A single-worker pool whose thread is started with a large stack."""
    with _limit_lock:
        previous = threading.stack_size(constants.HOST_THREAD_STACK_BYTES)
        try:
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="stepviz-run")
            # Threads are spawned lazily; start the worker while the size applies.
            executor.submit(int).result()
        finally:
            threading.stack_size(previous)
    return executor


@contextmanager
def _step_stream(program: InstrumentedProgram) -> Iterator[tuple[ThreadPoolExecutor, Iterator[TraceStep]]]:
    with _recursion_headroom():
        executor = _deep_stack_executor()
        stream = HostInterpreter(program).steps()
        try:
            yield executor, stream
        finally:
            try:
                executor.submit(stream.close).result()
            finally:
                executor.shutdown(wait=True)


def run(
    program: InstrumentedProgram,
    step_sink: StepSink | None = None,
    config: RunConfig = _DEFAULT_CONFIG,
) -> Trace:
    """Execute *program* to completion (or the step cap) and return its trace.

    Args:
        program: The instrumented HostLang program.
        step_sink: Optional callback invoked with each recorded step.
        config: Step cap and scheduling options.

    Returns:
        The Trace; ``trace.error`` is set if the program failed.
    """
    collector = _TraceCollector(config)
    with _contained(collector), _step_stream(program) as (executor, stream):
        while True:
            step = executor.submit(next, stream, None).result()
            if step is None or not collector.accept(step):
                break
            if step_sink is not None:
                step_sink(step)
    return collector.finish()


async def run_async(
    program: InstrumentedProgram,
    step_sink: StepSink | None = None,
    config: RunConfig = _DEFAULT_CONFIG,
) -> Trace:
    """Like ``run``, but awaits awaitable sink results and yields to the
    event loop between steps so a long simulation does not starve it."""
    collector = _TraceCollector(config)
    loop = asyncio.get_running_loop()
    with _contained(collector), _step_stream(program) as (executor, stream):
        while True:
            step = await loop.run_in_executor(executor, next, stream, None)
            if step is None or not collector.accept(step):
                break
            if step_sink is not None:
                result = step_sink(step)
                if inspect.isawaitable(result):
                    await result
            if config.yield_between_steps:
                await asyncio.sleep(0)
    return collector.finish()
