"""Base class for MCP-exposed tools."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolResult:
    """Uniform tool response: one text block, optionally flagged as an error."""

    text: str
    is_error: bool = False

    @classmethod
    def json(cls, payload: Any) -> "ToolResult":
        return cls(json.dumps(payload, indent=2, ensure_ascii=False))

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(message, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            data["isError"] = True
        return data


class Tool(ABC):
    """
    Abstract base class for tools.

    Subclasses declare a name, a description and a JSON-schema `parameters`
    object; `validate_params` checks call arguments against that schema
    before `execute` runs.
    """

    # Legacy argument names accepted on input and renamed before validation.
    param_aliases: dict[str, str] = {}

    _TYPE_MAP = {
        "string": str,
        "integer": int,
        "number": (int, float),
        "boolean": bool,
        "array": list,
        "object": dict,
    }

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name used in function calls."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does."""
        ...

    @property
    @abstractmethod
    def parameters(self) -> dict[str, Any]:
        """JSON Schema for tool parameters."""
        ...

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Run the tool with validated arguments."""
        ...

    def normalize_params(self, params: dict[str, Any]) -> dict[str, Any]:
        """Rename legacy argument names; the schema name wins when both are given."""
        out = dict(params)
        for old, new in self.param_aliases.items():
            if old in out:
                value = out.pop(old)
                out.setdefault(new, value)
        return out

    def validate_params(self, params: dict[str, Any]) -> list[str]:
        """Validate tool parameters against the JSON schema. Returns error list (empty if valid)."""
        schema = self.parameters or {}
        if schema.get("type", "object") != "object":
            raise ValueError(f"Schema must be object type, got {schema.get('type')!r}")
        return self._validate(params, {**schema, "type": "object"}, "")

    def _validate(self, val: Any, schema: dict[str, Any], path: str) -> list[str]:
        t, label = schema.get("type"), path or "parameter"
        if t in self._TYPE_MAP:
            # bool is an int subclass; keep it out of numeric fields.
            wrong_bool = t in ("integer", "number") and isinstance(val, bool)
            if wrong_bool or not isinstance(val, self._TYPE_MAP[t]):
                return [f"{label} should be {t}"]

        errors: list[str] = []
        if "enum" in schema and val not in schema["enum"]:
            errors.append(f"{label} must be one of {schema['enum']}")
        if t in ("integer", "number"):
            if "minimum" in schema and val < schema["minimum"]:
                errors.append(f"{label} must be >= {schema['minimum']}")
            if "maximum" in schema and val > schema["maximum"]:
                errors.append(f"{label} must be <= {schema['maximum']}")
        if t == "string":
            if "minLength" in schema and len(val) < schema["minLength"]:
                errors.append(f"{label} must be at least {schema['minLength']} chars")
            if "maxLength" in schema and len(val) > schema["maxLength"]:
                errors.append(f"{label} must be at most {schema['maxLength']} chars")
        if t == "object":
            props = schema.get("properties", {})
            for k in schema.get("required", []):
                if k not in val:
                    errors.append(f"missing required {path + '.' + k if path else k}")
            for k, v in val.items():
                if k in props:
                    errors.extend(self._validate(v, props[k], path + "." + k if path else k))
        if t == "array" and "items" in schema:
            for i, item in enumerate(val):
                errors.extend(
                    self._validate(item, schema["items"], f"{path}[{i}]" if path else f"[{i}]")
                )
        return errors

    def to_schema(self) -> dict[str, Any]:
        """Tool definition in MCP listing format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters,
        }
