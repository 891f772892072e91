"""
Metrics Logger for VendorPatch.

Stores one JSON line per apply run for later review.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from vendorpatch.patching.session import SessionResult


@dataclass
class ApplyMetrics:
    """Metrics for a single apply run."""

    timestamp: str
    tree_path: str
    patch_set: str

    # Outcome
    success: bool
    patches_total: int
    patches_applied: int
    failed_patch: Optional[str]

    duration_seconds: Optional[float] = None


class MetricsLogger:
    """
    Persistent metrics logger.

    Writes JSON lines to a file for later analysis.
    """

    def __init__(self, path: str = "vendorpatch_metrics.jsonl"):
        self.path = Path(path)
        self.skipped_lines = 0

    def log(self, metrics: ApplyMetrics) -> None:
        """
        Append metrics to the log file.

        Args:
            metrics: Run metrics to log
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(asdict(metrics)) + "\n")

    def read_all(self) -> list[ApplyMetrics]:
        """
        Read all logged metrics.

        Corrupt or foreign-schema lines are skipped and counted in
        ``skipped_lines``.

        Returns:
            List of ApplyMetrics objects
        """
        self.skipped_lines = 0
        if not self.path.exists():
            return []

        metrics = []
        with open(self.path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    metrics.append(ApplyMetrics(**json.loads(line)))
                except (ValueError, TypeError):
                    self.skipped_lines += 1

        return metrics

    def summary(self) -> dict:
        """
        Generate summary statistics.

        Returns:
            Dictionary of summary stats
        """
        all_metrics = self.read_all()

        if not all_metrics:
            return {"total_runs": 0, "skipped_lines": self.skipped_lines}

        total = len(all_metrics)
        successful = sum(1 for m in all_metrics if m.success)
        failures = [m for m in all_metrics if not m.success]

        return {
            "total_runs": total,
            "successful": successful,
            "success_rate": successful / total,
            "last_failed_patch": failures[-1].failed_patch if failures else None,
            "skipped_lines": self.skipped_lines,
        }


def log_run(
    logger: MetricsLogger,
    result: SessionResult,
    tree_path: str,
    patch_set: str,
    duration_seconds: Optional[float] = None,
) -> ApplyMetrics:
    """
    Log metrics from a completed apply session.

    Args:
        logger: Destination logger
        result: Session outcome
        tree_path: Vendored tree the session ran against
        patch_set: Requested patch set
        duration_seconds: Optional run duration

    Returns:
        The recorded metrics
    """
    metrics = ApplyMetrics(
        timestamp=datetime.now(timezone.utc).isoformat(),
        tree_path=str(tree_path),
        patch_set=patch_set,
        success=result.success,
        patches_total=result.total,
        patches_applied=len(result.applied),
        failed_patch=result.failed,
        duration_seconds=duration_seconds,
    )

    logger.log(metrics)
    return metrics
