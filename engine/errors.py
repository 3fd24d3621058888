"""
Error types raised by the execution engine.

Backend operation failures never appear here: they are captured in
OperationRecord.error and only surface through aggregate counts.
"""


class ConfigurationError(ValueError):
    """Run configuration is invalid; raised before any operation is dispatched."""


class OrchestrationError(RuntimeError):
    """Engine bookkeeping was violated; aborts the run and propagates to the caller."""
