"""
Run context handed to every generation phase: settings, counters, timers and
the per-phase results that collect errors and warnings.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from geodata_config import GeneratorSettings
from geodata_emitter import envelope, timestamp, write_document

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """A phase hit errors while running in strict mode."""


@dataclass
class GenerationResult:
    phase: str
    files_generated: int = 0
    records_processed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)
    duration: float = 0.0

    def summary(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "files_generated": self.files_generated,
            "records_processed": self.records_processed,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }


def format_duration(seconds: float) -> str:
    ms = seconds * 1000
    if ms < 1000:
        return f"{ms:.0f}ms"
    if ms < 60000:
        return f"{seconds:.2f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - minutes * 60:.2f}s"


class GenerationContext:
    def __init__(self, settings: GeneratorSettings):
        self.settings = settings
        self.results: List[GenerationResult] = []
        self.counters: Dict[str, int] = {}
        self.timers: Dict[str, float] = {}
        self.current: Optional[GenerationResult] = None
        self.started = time.perf_counter()
        self._lock = threading.Lock()

    # ============================================
    # COUNTERS AND TIMERS
    # ============================================

    def increment(self, name: str, value: int = 1):
        with self._lock:
            self.counters[name] = self.counters.get(name, 0) + value

    @contextmanager
    def measure(self, name: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.timers[name] = time.perf_counter() - start

    # ============================================
    # PHASES, ERRORS AND WARNINGS
    # ============================================

    @contextmanager
    def phase(self, name: str):
        """
        Run one generation phase.

        Yields the phase's GenerationResult. On exit the result is timed,
        logged and kept; in strict mode recorded errors abort the run.
        """
        result = GenerationResult(phase=name)
        self.current = result
        start = time.perf_counter()
        try:
            yield result
        finally:
            result.duration = time.perf_counter() - start
            self.timers[f"{name}_generation"] = result.duration
            self.results.append(result)
            self.current = None
            self._log_phase(result)

        if result.errors and self.settings.strict:
            raise GenerationError(f"{name} generation failed with {len(result.errors)} errors")

    def _log_phase(self, result: GenerationResult):
        logger.info(f"✓ {result.phase}: {result.files_generated} files, "
                    f"{result.records_processed} records in {format_duration(result.duration)}")
        if result.errors:
            logger.warning(f"⚠️  {len(result.errors)} errors occurred during {result.phase} generation")
        if result.warnings:
            logger.warning(f"⚠️  {len(result.warnings)} warnings generated during {result.phase} generation")

    def _target(self) -> GenerationResult:
        if self.current is None:
            self.current = GenerationResult(phase="setup")
            self.results.append(self.current)
        return self.current

    def record_error(self, message: str, **details: Any):
        if self.settings.error_mode == "ignore":
            return
        logger.error(f"❌ {message}")
        entry = {"error": message, "timestamp": timestamp(), **details}
        with self._lock:
            self._target().errors.append(entry)

    def record_warning(self, message: str, **details: Any):
        if self.settings.error_mode == "ignore":
            return
        logger.warning(f"⚠️ {message}")
        entry = {"message": message, "timestamp": timestamp(), **details}
        with self._lock:
            self._target().warnings.append(entry)

    def processed(self, count: int):
        with self._lock:
            self._target().records_processed += count
        self.increment("records_processed", count)

    @property
    def error_count(self) -> int:
        return sum(len(result.errors) for result in self.results)

    @property
    def warning_count(self) -> int:
        return sum(len(result.warnings) for result in self.results)

    # ============================================
    # OUTPUT
    # ============================================

    def envelope(self, data: Any, doc_type: str, **extra: Any) -> Dict[str, Any]:
        return envelope(data, doc_type, self.settings.api_version, **extra)

    def write(self, rel_path: str, document: Any) -> bool:
        """
        Write one document under the output directory.

        I/O and serialization failures are recorded on the current phase and
        reported as False; in strict mode they propagate.
        """
        try:
            write_document(self.settings.output_dir, rel_path, document, self.settings)
        except (OSError, TypeError, ValueError) as e:
            if self.settings.strict:
                raise
            self.record_error(f"Failed to write {rel_path}: {e}", file_path=rel_path)
            return False

        with self._lock:
            self._target().files_generated += 1
        self.increment("files_generated")
        return True

    def map_parallel(self, func: Callable[[Any], Any], items: Iterable[Any]) -> List[Any]:
        """
        Apply func to every item on a bounded thread pool.

        Results come back in completion order. A failing item is recorded as
        an error and skipped unless the run is strict.
        """
        items = list(items)
        results = []
        if not items:
            return results

        with ThreadPoolExecutor(max_workers=self.settings.max_concurrency) as executor:
            futures = {executor.submit(func, item): item for item in items}
            for future in as_completed(futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    if self.settings.strict:
                        for pending in futures:
                            pending.cancel()
                        raise
                    self.record_error(f"Parallel processing error: {e}")
        return results

    # ============================================
    # REPORTING
    # ============================================

    def report(self) -> Dict[str, Any]:
        total = time.perf_counter() - self.started
        return {
            "total_duration": format_duration(total),
            "total_duration_ms": round(total * 1000),
            "timers": {
                name: {
                    "duration": format_duration(seconds),
                    "duration_ms": round(seconds * 1000),
                    "percentage": f"{(seconds / total * 100) if total else 0:.1f}%",
                }
                for name, seconds in self.timers.items()
            },
            "counters": dict(self.counters),
        }

    def log_report(self):
        report = self.report()
        logger.info("🏁 Performance Report")
        logger.info("=" * 60)
        logger.info(f"Total Duration: {report['total_duration']}")
        for name, timer in report["timers"].items():
            logger.info(f"  {name}: {timer['duration']} ({timer['percentage']})")
        for name, count in report["counters"].items():
            logger.info(f"  {name}: {count:,}")

        files = self.counters.get("files_generated", 0)
        if files and report["total_duration_ms"]:
            logger.info(f"Throughput: {files / (report['total_duration_ms'] / 1000):.1f} files/sec")
        logger.info(f"Errors: {self.error_count}, warnings: {self.warning_count}")
        logger.info("=" * 60)
