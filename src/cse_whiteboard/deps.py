"""Dependency injection singletons for CSE Whiteboard."""

from cse_whiteboard.common.config import get_settings
from cse_whiteboard.common.database import DatabaseManager
from cse_whiteboard.common.invalidation import ViewInvalidator
from cse_whiteboard.audit.service import AuditService
from cse_whiteboard.customers.service import CustomerService
from cse_whiteboard.notes.service import NoteService
from cse_whiteboard.todos.service import TodoService
from cse_whiteboard.reports.service import ReportService
from cse_whiteboard.reports.summarizer import SummaryClient

_db: DatabaseManager | None = None
_invalidator: ViewInvalidator | None = None
_audit: AuditService | None = None
_customers: CustomerService | None = None
_notes: NoteService | None = None
_todos: TodoService | None = None
_reports: ReportService | None = None
_summary_client: SummaryClient | None = None


def get_db() -> DatabaseManager:
    global _db
    if _db is None:
        _db = DatabaseManager(get_settings())
    return _db


def get_invalidator() -> ViewInvalidator:
    global _invalidator
    if _invalidator is None:
        _invalidator = ViewInvalidator()
    return _invalidator


def get_audit_service() -> AuditService:
    global _audit
    if _audit is None:
        _audit = AuditService(get_settings())
    return _audit


def get_customer_service() -> CustomerService:
    global _customers
    if _customers is None:
        _customers = CustomerService(
            get_settings(),
            audit_service=get_audit_service(),
            invalidator=get_invalidator(),
        )
    return _customers


def get_note_service() -> NoteService:
    global _notes
    if _notes is None:
        _notes = NoteService(
            get_settings(),
            audit_service=get_audit_service(),
            invalidator=get_invalidator(),
        )
    return _notes


def get_todo_service() -> TodoService:
    global _todos
    if _todos is None:
        _todos = TodoService(
            get_settings(),
            audit_service=get_audit_service(),
            invalidator=get_invalidator(),
        )
    return _todos


def get_summary_client() -> SummaryClient | None:
    """None when summaries are disabled or no API key is configured."""
    global _summary_client
    settings = get_settings()
    if not settings.summaries_configured:
        return None
    if _summary_client is None:
        _summary_client = SummaryClient(settings)
    return _summary_client


def get_report_service() -> ReportService:
    global _reports
    if _reports is None:
        _reports = ReportService(get_settings(), summary_client=get_summary_client())
    return _reports


def reset_singletons() -> None:
    """Reset all singletons (for testing)."""
    global _db, _invalidator, _audit, _customers, _notes, _todos, _reports, _summary_client
    _db = None
    _invalidator = None
    _audit = None
    _customers = None
    _notes = None
    _todos = None
    _reports = None
    _summary_client = None
