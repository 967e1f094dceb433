"""Detect which API description dialect a parsed document uses."""


def detect_spec_version(data: object) -> str | None:
    """Return 'swagger2', 'openapi3', or None for a parsed document."""
    if not isinstance(data, dict):
        return None
    if str(data.get("swagger", "")).startswith("2"):
        return "swagger2"
    if str(data.get("openapi", "")).startswith("3"):
        return "openapi3"
    return None
