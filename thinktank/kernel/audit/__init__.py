"""
Audit trail - append-only log of mutations.
"""

from thinktank.kernel.audit.audit_store import AuditStore

__all__ = ["AuditStore"]
