"""
Metrics for VendorPatch.

Tracks apply runs:
- Success rate
- How far failed sessions got
- Which patch broke last
"""

from vendorpatch.metrics.logger import ApplyMetrics, MetricsLogger, log_run

__all__ = ["ApplyMetrics", "MetricsLogger", "log_run"]
