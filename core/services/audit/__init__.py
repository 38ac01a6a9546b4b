from core.services.audit.helpers import allocation_audit_details, record_audit
from core.services.audit.service import AuditService

__all__ = ["AuditService", "record_audit", "allocation_audit_details"]
