"""
Name: Request Context (ContextVars)

Responsibilities:
  - Store request-scoped data (request_id, action, method, path)
  - Enable structured logging with request correlation

Collaborators:
  - middleware.py: Sets request_id/method/path at request start
  - application.use_cases: Set the action name while an action runs
  - logger.py: Reads context for log enrichment

Constraints:
  - Only primitive types (str) for safety
  - Default empty string (never None) for JSON serialization
"""

from contextvars import ContextVar

# R: Request identifier (UUID) - set by middleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# R: Integration action being executed (createTable, insertData, ...)
action_var: ContextVar[str] = ContextVar("action", default="")

# R: HTTP method - set by middleware
http_method_var: ContextVar[str] = ContextVar("http_method", default="")

# R: Request path - set by middleware
http_path_var: ContextVar[str] = ContextVar("http_path", default="")


def get_context_dict() -> dict:
    """
    R: Get current context as dict for log enrichment.

    Returns:
        Dict with non-empty context values only
    """
    ctx = {}

    if val := request_id_var.get():
        ctx["request_id"] = val
    if val := action_var.get():
        ctx["action"] = val
    if val := http_method_var.get():
        ctx["method"] = val
    if val := http_path_var.get():
        ctx["path"] = val

    return ctx


def clear_context() -> None:
    """R: Reset all context vars (called at request end)."""
    request_id_var.set("")
    action_var.set("")
    http_method_var.set("")
    http_path_var.set("")
