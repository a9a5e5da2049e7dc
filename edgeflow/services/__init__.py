"""Service layer for workflow engine business logic."""

from .ai_service import AIService
from .email_service import EmailMessage, EmailSender, LoggingEmailSender
from .execution_service import ExecutionService
from .kv_service import KVService
from .node_service import NodeService
from .schedule_service import ScheduleService
from .webhook_service import WebhookService

__all__ = [
    "AIService",
    "EmailMessage",
    "EmailSender",
    "LoggingEmailSender",
    "ExecutionService",
    "KVService",
    "NodeService",
    "ScheduleService",
    "WebhookService",
]
