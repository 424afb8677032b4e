import logging
from typing import Optional, Any, Dict
from django.db import DatabaseError
from core.models import AuditEvent

logger = logging.getLogger(__name__)


def log_action(*, user_id: Optional[int], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> Optional[AuditEvent]:
    """Record an audit event; a failed audit write never fails the caller."""
    try:
        return AuditEvent.objects.create(
            user_id=user_id,
            action=action,
            object_type=object_type, object_id=object_id,
            detail=detail or {},
        )
    except DatabaseError:
        logger.warning("audit write failed: action=%s object=%s:%s", action, object_type, object_id, exc_info=True)
        return None
