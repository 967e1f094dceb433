"""Swagger 2.0 / OpenAPI 3.x document loader.

Reads a document from disk and exposes what the coverage builder needs:
the declared operations by path and method, the merged parameters of each
operation, and the shared definitions table.
"""

import json
import logging
from pathlib import Path

import yaml

from rest_coverage.errors import DocumentLoadError

from .base import Param
from .detect import detect_spec_version

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def load_document(file_path: str | Path) -> "SwaggerDocument":
    """Load a Swagger/OpenAPI file into a SwaggerDocument.

    ``.json`` files are parsed as JSON, everything else as YAML.

    Raises:
        DocumentLoadError: missing or unreadable file, invalid JSON/YAML,
            or a payload that is not a Swagger 2.0 / OpenAPI 3.x document.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(str(path), e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise DocumentLoadError(str(path), f"not UTF-8 text: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentLoadError(str(path), f"invalid document: {e}") from e

    version = detect_spec_version(data)
    if version is None:
        raise DocumentLoadError(str(path), "not a Swagger 2.0 or OpenAPI 3.x document")
    if not isinstance(data.get("paths") or {}, dict):
        raise DocumentLoadError(str(path), "'paths' must be a mapping")

    logger.debug("Loaded %s document from %s", version, path)
    return SwaggerDocument(data, version, source=str(path))


class SwaggerDocument:
    """Read-only view over a parsed Swagger/OpenAPI document."""

    def __init__(self, spec: dict, version: str, source: str = ""):
        self.spec = spec
        self.version = version
        self.source = source

    @property
    def definitions(self) -> dict:
        """Shared schema table: ``definitions`` or ``components.schemas``."""
        if self.version == "openapi3":
            return (self.spec.get("components") or {}).get("schemas") or {}
        return self.spec.get("definitions") or {}

    def operations(self) -> dict[str, dict[str, dict]]:
        """Return {path: {METHOD: operation}} for every declared operation."""
        result: dict[str, dict[str, dict]] = {}
        for path, item in (self.spec.get("paths") or {}).items():
            if not isinstance(item, dict):
                continue
            methods = {
                method.upper(): operation
                for method, operation in item.items()
                if method.lower() in HTTP_METHODS and isinstance(operation, dict)
            }
            if methods:
                result[path] = methods
        return result

    def params_for(self, method: str, path: str) -> dict[str, Param]:
        """Return the parameters of one operation keyed by ``"<in>#<name>"``.

        Path-level parameters are merged first so that operation-level
        parameters with the same location and name override them. OpenAPI 3
        request bodies show up as a body parameter named ``body``.
        """
        item = (self.spec.get("paths") or {}).get(path) or {}
        operation = item.get(method.lower()) or {}

        params: dict[str, Param] = {}
        raw_params = list(item.get("parameters") or []) + list(operation.get("parameters") or [])
        for raw in raw_params:
            param = self._parse_parameter(raw)
            if param is not None:
                params[f"{param.location}#{param.name}"] = param

        if self.version == "openapi3":
            body = self._parse_request_body(operation.get("requestBody"))
            if body is not None:
                params[f"body#{body.name}"] = body
        return params

    def resolve_pointer(self, ref: str) -> object | None:
        """Resolve a local JSON pointer such as ``#/parameters/limit``."""
        if not isinstance(ref, str) or not ref.startswith("#/"):
            return None
        node: object = self.spec
        for token in ref[2:].split("/"):
            token = token.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, dict) or token not in node:
                return None
            node = node[token]
        return node

    def _parse_parameter(self, raw: object) -> Param | None:
        if isinstance(raw, dict) and "$ref" in raw:
            resolved = self.resolve_pointer(raw["$ref"])
            if not isinstance(resolved, dict):
                logger.warning("Skipping unresolvable parameter reference %s", raw["$ref"])
                return None
            raw = resolved
        if not isinstance(raw, dict) or "name" not in raw or "in" not in raw:
            logger.warning("Skipping malformed parameter %r", raw)
            return None

        schema = raw.get("schema")
        return Param(
            name=raw["name"],
            location=raw["in"],
            body_schema=schema if raw["in"] == "body" and isinstance(schema, dict) else None,
        )

    def _parse_request_body(self, body: object) -> Param | None:
        if isinstance(body, dict) and "$ref" in body:
            body = self.resolve_pointer(body["$ref"])
        if not isinstance(body, dict):
            return None
        content = body.get("content") or {}
        schema = None
        for content_type in ("application/json", "multipart/form-data"):
            if content_type in content:
                schema = (content[content_type] or {}).get("schema")
                break
        else:
            # Fallback: first available schema
            for media in content.values():
                schema = (media or {}).get("schema")
                break
        if not isinstance(schema, dict):
            return None
        return Param(
            name="body",
            location="body",
            body_schema=schema,
        )
