#!/usr/bin/env python3
"""Performance monitoring for per-frame tree computations."""

import time
import psutil
import functools
from typing import Dict, Any, Optional, List, Callable
from dataclasses import dataclass, field
from collections import defaultdict
from contextlib import contextmanager

from svctree.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PerformanceMetric:
    """Individual performance metric."""
    name: str
    start_time: float
    end_time: Optional[float] = None
    duration: Optional[float] = None
    memory_before: Optional[float] = None
    memory_after: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def finish(self, end_time: Optional[float] = None) -> float:
        """Mark the metric as finished and calculate duration."""
        self.end_time = end_time or time.perf_counter()
        self.duration = self.end_time - self.start_time
        return self.duration

    def add_memory_usage(self, before: float, after: float) -> None:
        """Add memory usage information."""
        self.memory_before = before
        self.memory_after = after
        self.metadata['memory_delta'] = after - before


class PerformanceMonitor:
    """Collects timings of flatten/project/rebuild calls."""

    def __init__(self, enabled: bool = True, track_memory: bool = False):
        self.enabled = enabled
        self.track_memory = track_memory
        self.metrics: List[PerformanceMetric] = []
        self.aggregated_stats: Dict[str, List[float]] = defaultdict(list)

    @contextmanager
    def measure(self, operation_name: str, **metadata):
        """Context manager for measuring operation performance."""
        if not self.enabled:
            yield None
            return

        metric = PerformanceMetric(
            name=operation_name,
            start_time=time.perf_counter(),
            memory_before=self._get_memory_usage() if self.track_memory else None,
            metadata=metadata
        )
        try:
            yield metric
        finally:
            self._finish(metric)

    def _finish(self, metric: PerformanceMetric) -> None:
        duration = metric.finish(time.perf_counter())
        if metric.memory_before is not None:
            metric.add_memory_usage(metric.memory_before, self._get_memory_usage())

        self.metrics.append(metric)
        self.aggregated_stats[metric.name].append(duration)
        logger.debug(f"Performance: {metric.name} took {duration * 1000:.3f}ms")

    def get_stats(self) -> Dict[str, Any]:
        """Get aggregated performance statistics."""
        stats = {}

        for name, durations in self.aggregated_stats.items():
            if durations:
                stats[name] = {
                    'count': len(durations),
                    'total_time': sum(durations),
                    'avg_time': sum(durations) / len(durations),
                    'min_time': min(durations),
                    'max_time': max(durations),
                    'last_time': durations[-1]
                }

        return stats

    def get_recent_metrics(self, limit: int = 10) -> List[PerformanceMetric]:
        """Get the most recent performance metrics."""
        return self.metrics[-limit:] if self.metrics else []

    def clear_metrics(self) -> None:
        """Clear all stored metrics."""
        self.metrics.clear()
        self.aggregated_stats.clear()
        logger.debug("Performance metrics cleared")

    def log_slow_operations(self, threshold_seconds: float = 1 / 60) -> None:
        """Log operations slower than the threshold (one 60Hz frame by default)."""
        slow_ops = [
            metric for metric in self.metrics
            if metric.duration and metric.duration > threshold_seconds
        ]

        if slow_ops:
            logger.warning(f"Found {len(slow_ops)} slow operations (>{threshold_seconds * 1000:.1f}ms):")
            for metric in slow_ops:
                logger.warning(f"  {metric.name}: {metric.duration * 1000:.3f}ms")

    def _get_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        try:
            process = psutil.Process()
            return process.memory_info().rss / 1024 / 1024
        except (psutil.NoSuchProcess, AttributeError):
            return 0.0


# Global performance monitor instance
_performance_monitor = PerformanceMonitor(enabled=False)  # Disabled by default


def enable_performance_monitoring(enabled: bool = True, track_memory: bool = False) -> None:
    """Enable or disable global performance monitoring."""
    _performance_monitor.enabled = enabled
    _performance_monitor.track_memory = track_memory
    logger.info(f"Performance monitoring {'enabled' if enabled else 'disabled'}")


def get_performance_monitor() -> PerformanceMonitor:
    """Get the global performance monitor instance."""
    return _performance_monitor


def performance_timer(operation_name: Optional[str] = None):
    """Decorator for timing function execution."""
    def decorator(func: Callable) -> Callable:
        name = operation_name or f"{func.__module__}.{func.__name__}"

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with _performance_monitor.measure(name):
                return func(*args, **kwargs)
        return wrapper
    return decorator


def time_operation(name: str):
    """Context manager for timing operations."""
    return _performance_monitor.measure(name)
