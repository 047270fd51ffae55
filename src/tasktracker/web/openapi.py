from typing import Any
from uuid import UUID

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

from tasktracker.web.cookies import SESSION_COOKIE

# Endpoints reachable without a session
PUBLIC_ENDPOINTS = {
    ("POST", "/api/v1/users"),
    ("POST", "/api/v1/users/login"),
    ("POST", "/api/v1/users/logout"),
    ("POST", "/api/v1/users/forgot-password"),
    ("POST", "/api/v1/users/reset-password"),
    ("GET", "/health"),
}


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="TaskTracker API",
            version="0.1.0",
            summary="Personal task tracking with cookie-based sessions",
            routes=app.routes,
        )

        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "Session token sent as a Bearer header",
            },
            "SessionCookie": {
                "type": "apiKey",
                "in": "cookie",
                "name": SESSION_COOKIE,
                "description": "HTTP-only session cookie set by login",
            },
        }

        # Apply security globally, public endpoints override it below
        openapi_schema["security"] = [
            {"SessionCookie": []},
            {"BearerAuth": []},
        ]

        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in PUBLIC_ENDPOINTS:
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid email or password", "type": "authentication_error"},
                {"message": "Task not found", "type": "not_found"},
                {"message": "Email already in use", "type": "conflict"},
            ]
        }
    }


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable result")


class CreatedResponse(BaseModel):
    """Identifier of a newly created resource."""

    id: UUID = Field(..., description="ID of the created resource")
