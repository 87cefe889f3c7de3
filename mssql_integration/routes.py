"""
Name: Integration API Controllers

Responsibilities:
  - Expose the integration's actions and lifecycle hooks over HTTP
  - Delegate to MicrosoftSqlIntegration (validation, dispatch, output shape)

Collaborators:
  - container.get_integration: the wired integration
  - exception_handlers: turn integration errors into problem responses

Constraints:
  - Sync endpoints; FastAPI runs them in its thread pool, so concurrent
    actions share the pool concurrently

Notes:
  - The action body uses the platform's field names (tableName, data, ...)
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from .container import get_integration
from .integration import MicrosoftSqlIntegration

# R: Create API router for integration endpoints
router = APIRouter()


@router.post("/actions/{action_name}", tags=["actions"])
def run_action(
    action_name: str,
    payload: Dict[str, Any] = Body(...),
    integration: MicrosoftSqlIntegration = Depends(get_integration),
) -> Dict[str, Any]:
    """R: Run one action (createTable, dropTable, insertData, ...)."""
    return integration.run_action(action_name, payload)


@router.post("/register", tags=["lifecycle"])
def register(
    integration: MicrosoftSqlIntegration = Depends(get_integration),
) -> Dict[str, str]:
    """R: Open the pool; fails with 503 if SQL Server is unreachable."""
    integration.register()
    return {"status": "registered"}


@router.post("/unregister", tags=["lifecycle"])
def unregister(
    integration: MicrosoftSqlIntegration = Depends(get_integration),
) -> Dict[str, str]:
    """R: Close the pool."""
    integration.unregister()
    return {"status": "unregistered"}
