"""OpenAPI metadata customization.

Adds tag descriptions and documents the shared error body and the 429
response on every operation, keeping documentation concerns out of the app
factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

ERROR_SCHEMA_NAME = "ErrorResponse"

_ERROR_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "error": {"type": "string", "description": "Short, human-readable message"},
        "code": {"type": "string", "description": "Stable machine-readable code"},
        "request_id": {"type": "string", "nullable": True},
    },
    "required": ["error", "code"],
}

_TAGS = [
    {
        "name": "Generation",
        "description": "Chat passthrough, clue and fact generation.",
    },
    {
        "name": "Health",
        "description": "Liveness check.",
    },
]


def _error_response(description: str) -> Dict[str, Any]:
    return {
        "description": description,
        "content": {
            "application/json": {
                "schema": {"$ref": f"#/components/schemas/{ERROR_SCHEMA_NAME}"}
            }
        },
    }


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation.

    - Registers the ``ErrorResponse`` component schema
    - Documents 429 on every operation, 400/500 on generation endpoints
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        components.setdefault("schemas", {}).setdefault(ERROR_SCHEMA_NAME, _ERROR_SCHEMA)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict):
                    continue
                responses = method_obj.setdefault("responses", {})
                responses.setdefault("429", _error_response("Rate limit exceeded"))
                if path != "/health":
                    responses.setdefault("400", _error_response("Invalid request body"))
                    responses.setdefault("500", _error_response("Generation failed"))

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
