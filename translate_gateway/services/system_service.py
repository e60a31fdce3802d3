"""
System Health Service.

Process-level health for GET /health:

{
  "status": "operational",
  "uptime": 1234.5,
  "timestamp": "ISO datetime",
  "memoryUsage": {"rss": 52428800, "vms": 401604608, "percent": 0.6}
}

Uptime counts from process creation, not from application startup.
"""
from typing import Optional
import time

import psutil

from translate_gateway.schemas.schemas import HealthResponse, MemoryUsage, utc_timestamp


class SystemService:
    """Service for process health monitoring."""

    STATUS_OPERATIONAL = "operational"

    def __init__(self, process: Optional[psutil.Process] = None):
        self.process = process or psutil.Process()

    def uptime(self) -> float:
        return max(0.0, time.time() - self.process.create_time())

    def memory_usage(self) -> MemoryUsage:
        info = self.process.memory_info()
        return MemoryUsage(
            rss=info.rss,
            vms=info.vms,
            percent=round(self.process.memory_percent(), 2)
        )

    def get_health(self) -> HealthResponse:
        return HealthResponse(
            status=self.STATUS_OPERATIONAL,
            uptime=round(self.uptime(), 3),
            timestamp=utc_timestamp(),
            memory_usage=self.memory_usage()
        )
