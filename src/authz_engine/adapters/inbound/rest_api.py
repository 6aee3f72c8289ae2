"""FastAPI REST adapter for the authorization engine.

Provides HTTP endpoints for authorization decisions and runtime
management of the in-memory stores. Conditions are code, so roles
created over HTTP carry unconditional grants only.

Usage:
    from authz_engine.adapters.inbound.rest_api import create_app

    host = AuthorizationBuilder.create().add_role(...).assign(...).build()
    app = create_app(host)
    # Run with: uvicorn module:app --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, status
from pydantic import BaseModel, Field

from authz_engine.application.host import AuthorizationHost
from authz_engine.domain.entities.assignment import Assignment
from authz_engine.domain.entities.role import PermissionGrant, Role
from authz_engine.domain.errors import UnsupportedOperationError
from authz_engine.domain.value_objects.bags import ScopeBag
from authz_engine.domain.value_objects.identifiers import (
    PermissionId,
    create_principal_id,
    create_role_id,
)
from authz_engine.infrastructure.logging import get_logger

logger = get_logger(__name__)


# Pydantic models for request/response serialization


class AuthorizeRequestModel(BaseModel):
    """Authorization request."""

    principal: str = Field(..., min_length=1, description="Principal being authorized")
    permission: str = Field(..., min_length=1, description="Permission as resource:action")
    scope: dict[str, str] = Field(default_factory=dict, description="Requested scope")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Runtime attributes")


class DecisionResponse(BaseModel):
    """Authorization decision response."""

    allowed: bool
    deny_reason: str
    matched_role: Optional[str] = None
    matched_permission: Optional[str] = None


class GrantModel(BaseModel):
    """Unconditional grant."""

    permission: str = Field(..., min_length=1)
    scope: dict[str, str] = Field(default_factory=dict)


class CreateRoleRequest(BaseModel):
    """Request to add or replace a role."""

    role_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    grants: list[GrantModel] = Field(default_factory=list)


class CreateAssignmentRequest(BaseModel):
    """Request to assign a role to a principal."""

    principal: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None


class RevokeAssignmentRequest(BaseModel):
    """Request to revoke a role from a principal."""

    principal: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)


class AssignmentResponse(BaseModel):
    """Assignment details response."""

    principal: str
    role: str
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None
    revoked: bool


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


def _assignment_response(assignment: Assignment) -> AssignmentResponse:
    return AssignmentResponse(
        principal=str(assignment.principal),
        role=str(assignment.role),
        not_before=assignment.not_before,
        not_after=assignment.not_after,
        revoked=assignment.revoked,
    )


def create_app(host: AuthorizationHost) -> FastAPI:
    """Create FastAPI application with authorization endpoints.

    Args:
        host: AuthorizationHost serving decisions and management calls.

    Returns:
        Configured FastAPI application.
    """
    from authz_engine import __version__

    app = FastAPI(
        title="Authorization Engine API",
        description="RBAC + ABAC authorization decisions with scoped, time-bounded role assignments",
        version=__version__,
    )

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check():
        """Check service health."""
        return HealthResponse(status="healthy", version=__version__)

    @app.post("/v1/authorize", response_model=DecisionResponse, tags=["Authorization"])
    async def authorize(request: AuthorizeRequestModel):
        """Evaluate an authorization request."""
        try:
            decision = await host.authorize(
                request.principal,
                request.permission,
                scope=request.scope,
                attributes=request.attributes,
            )
        except ValueError as e:
            # InvalidPermissionError is a ValueError
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return DecisionResponse(**decision.to_dict())

    @app.post("/v1/roles", status_code=status.HTTP_201_CREATED, tags=["Management"])
    async def create_role(request: CreateRoleRequest):
        """Add or replace a role with unconditional grants."""
        try:
            role_id = create_role_id(request.role_id)
            grants = [
                PermissionGrant(PermissionId.parse(g.permission), ScopeBag(g.scope))
                for g in request.grants
            ]
            host.add_role(Role(role_id=role_id, name=request.name or role_id, grants=tuple(grants)))
        except UnsupportedOperationError as e:
            raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return {"role_id": request.role_id, "grants": len(request.grants), "status": "created"}

    @app.post(
        "/v1/assignments",
        response_model=AssignmentResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Management"],
    )
    async def create_assignment(request: CreateAssignmentRequest):
        """Assign a role to a principal."""
        try:
            assignment = Assignment(
                create_principal_id(request.principal),
                create_role_id(request.role),
                request.not_before,
                request.not_after,
            )
            host.add_assignment(assignment)
        except UnsupportedOperationError as e:
            raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        return _assignment_response(assignment)

    @app.post("/v1/assignments/revoke", tags=["Management"])
    async def revoke_assignment(request: RevokeAssignmentRequest):
        """Revoke a role from a principal. Idempotent."""
        try:
            revoked = host.revoke(request.principal, request.role)
        except UnsupportedOperationError as e:
            raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail=str(e))
        return {"principal": request.principal, "role": request.role, "revoked": revoked}

    @app.get(
        "/v1/principals/{principal}/assignments",
        response_model=list[AssignmentResponse],
        tags=["Management"],
    )
    async def list_assignments(principal: str):
        """List a principal's assignments, active or not."""
        try:
            principal_id = create_principal_id(principal)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        assignments = await host.assignment_store.get_assignments_for_principal(principal_id)
        return [_assignment_response(a) for a in assignments]

    logger.info("rest_api_created", management=host.supports_management)
    return app
