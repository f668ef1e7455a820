"""flycsrf Logging — hexagonal logging port and adapters."""

from flycsrf.logging.port import LoggingPort
from flycsrf.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
