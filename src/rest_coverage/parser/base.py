"""Data models shared by the document loader and the coverage builder.

The loader turns every declared operation parameter into a Param, and the
builder produces one RequestStats per (path, method) pair.
"""

from pydantic import BaseModel, ConfigDict, Field


class Param(BaseModel):
    """A single declared operation parameter."""

    name: str
    location: str  # body / query / path / header / formData / cookie
    body_schema: dict | None = None  # body parameters only, may be a $ref


class RequestStats(BaseModel):
    """Coverage record for one (path, method) pair.

    ``body`` is None when the operation accepts no body and an empty dict
    when it does. ``params_hit`` and ``method_called`` are only changed by
    the request recorder.
    """

    model_config = ConfigDict(validate_assignment=True)

    path: str = Field(frozen=True)
    method: str = Field(frozen=True)
    body: dict[str, int] | None = None
    query: dict[str, int] = Field(default_factory=dict)
    params_num: int = 0
    params_hit: int = 0
    method_called: bool = False


# path -> METHOD -> record
CoverageMap = dict[str, dict[str, RequestStats]]
