"""Classify an operation's parameters into the body and query buckets of a record."""

from collections.abc import Iterable

from rest_coverage.parser.base import Param, RequestStats

from .schema import count_ref_params


def add_swagger_params(
    record: RequestStats,
    params: dict[str, Param] | Iterable[Param],
    definitions: dict,
) -> None:
    """Add the body and query parameters of one operation to ``record``.

    A body parameter with a schema switches ``record.body`` from None to an
    empty dict and adds its resolved leaf count to ``params_num``. Each query
    parameter gets a zero entry in ``record.query`` and counts as one.
    Other locations (path, header, formData, cookie) are not tracked.

    Meant to be called once per record; a second call counts twice.
    """
    if isinstance(params, dict):
        params = params.values()

    for param in params:
        if param.location == "body":
            if param.body_schema is not None:
                record.body = {}
                record.params_num += count_ref_params(param.body_schema, definitions)
        elif param.location == "query":
            record.query[param.name] = 0
            record.params_num += 1
