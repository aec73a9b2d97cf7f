"""
    Assessment orchestration.

    Per target: collect facts -> run diagnostic tool (unless skipped) ->
    parse report -> evaluate. Targets run on a thread pool and share nothing
    but the read-only RequirementProfile.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Iterator

from collectors.facts import FactCollector
from core.errors import DiagnosticError, QueryError, TargetError
from core.models import AssessmentRecord, DiagnosticReport, RequirementProfile, Target
from core.verdict import evaluate
from diagnostics.dxdiag import parse_report
from diagnostics.invoker import DiagnosticInvoker

logger = logging.getLogger(__name__)

SkipHandler = Callable[[Target, TargetError], None]


class Assessor:
    def __init__(
        self,
        profile: RequirementProfile,
        collector: FactCollector,
        invoker: DiagnosticInvoker | None = None,
        parser: Callable[[bytes], DiagnosticReport] = parse_report,
        max_workers: int = 4,
        on_skip: SkipHandler | None = None,
    ):
        if invoker is None and not profile.skip_diagnostics:
            raise ValueError("a diagnostic invoker is required unless diagnostics are skipped")
        self.profile = profile
        self.collector = collector
        self.invoker = invoker
        self.parser = parser
        self.max_workers = max_workers
        self.on_skip = on_skip

    def _diagnose(self, target: Target) -> tuple[DiagnosticReport | None, str | None]:
        if self.profile.skip_diagnostics:
            return None, None
        try:
            raw = self.invoker.invoke(target.name)
            return self.parser(raw), None
        except DiagnosticError as e:
            logger.warning("%s: diagnostic unavailable (%s): %s", target, type(e).__name__, e)
            return None, type(e).__name__

    def assess(self, target: Target) -> AssessmentRecord:
        """
            Run the full pipeline for one target.

            Raises Unreachable or QueryError when facts cannot be collected.
            Diagnostic failures never raise; they produce a record whose
            diagnostic is None and whose diagnostic criterion is not met.
        """
        facts = self.collector.collect(target)
        report, error = self._diagnose(target)
        record = evaluate(facts, report, self.profile, diagnostic_error=error)
        logger.info("%s: ready=%s tier=%s", target, record.ready, record.tier)
        return record

    def _skip(self, target: Target, error: TargetError) -> None:
        logger.warning("%s: skipped (%s): %s", target, type(error).__name__, error)
        if self.on_skip is not None:
            self.on_skip(target, error)

    def assess_all(self, targets: Iterable[Target]) -> Iterator[AssessmentRecord]:
        """
            Yield one record per target whose facts could be collected, in
            completion order. Skipped targets go to on_skip and the log.

            A failure in one target never stops the others: anything other
            than a TargetError is logged and skipped as a "pipeline" QueryError.
        """
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            future_to_target = {
                executor.submit(self.assess, target): target for target in targets
            }
            for future in as_completed(future_to_target):
                target = future_to_target[future]
                try:
                    record = future.result()
                except TargetError as e:
                    self._skip(target, e)
                    continue
                except Exception as e:
                    logger.exception("%s: pipeline failed unexpectedly", target)
                    error = QueryError(target.name, "pipeline", f"{type(e).__name__}: {e}")
                    error.__cause__ = e
                    self._skip(target, error)
                    continue
                yield record
        finally:
            # pending futures are dropped if the caller stops iterating early
            executor.shutdown(wait=True, cancel_futures=True)
