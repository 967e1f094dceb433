"""Record observed requests against a coverage map.

The builder hands back plain records; this module is the only place that
changes their hit counters. Each record has its own lock, so requests for
different endpoints can be recorded from different threads in parallel.
"""

import json
import logging
import threading
from collections import Counter
from pathlib import Path

from pydantic import BaseModel, ValidationError

from rest_coverage.errors import RestCoverageError, UnknownEndpointError
from rest_coverage.parser.base import CoverageMap, RequestStats

logger = logging.getLogger(__name__)


class RecordedRequest(BaseModel):
    """One observed request as stored in a hits file."""

    path: str
    method: str
    query: list[str] = []
    body: list[str] = []


class CoverageRecorder:
    """Synchronized mutation API over a coverage map."""

    def __init__(self, coverage_map: CoverageMap):
        self.coverage_map = coverage_map
        self._locks = {
            (path, method): threading.Lock()
            for path, methods in coverage_map.items()
            for method in methods
        }
        self._counter_lock = threading.Lock()
        self.unexpected: Counter[str] = Counter()
        self.unmatched: list[str] = []

    def record_call(self, path: str, method: str) -> None:
        """Mark an endpoint as called."""
        stats, lock = self._lookup(path, method)
        with lock:
            stats.method_called = True

    def record_hit(self, path: str, method: str, field: str, location: str = "query") -> None:
        """Count one observed body or query field of an endpoint.

        The first hit of a field raises ``params_hit`` by one. Fields the
        document does not declare are tallied in ``unexpected`` instead.
        """
        stats, lock = self._lookup(path, method)
        with lock:
            if location == "query":
                counts = stats.query
                if field not in counts:
                    self._unexpected(stats, location, field)
                    return
            elif location == "body":
                if stats.body is None:
                    self._unexpected(stats, location, field)
                    return
                counts = stats.body
            else:
                raise ValueError(f"Unsupported parameter location: {location}")

            first = counts.get(field, 0) == 0
            counts[field] = counts.get(field, 0) + 1
            if first and stats.params_hit < stats.params_num:
                stats.params_hit += 1

    def record_request(
        self,
        path: str,
        method: str,
        query: list[str] | tuple[str, ...] = (),
        body: list[str] | tuple[str, ...] = (),
    ) -> None:
        """Record a call together with the query and body fields it used."""
        self.record_call(path, method)
        for field in query:
            self.record_hit(path, method, field, "query")
        for field in body:
            self.record_hit(path, method, field, "body")

    def load_hits(self, file_path: str | Path) -> int:
        """Replay a JSON list of recorded requests.

        Requests for undeclared endpoints are logged and kept in
        ``unmatched``. Returns the number of requests that matched.
        """
        try:
            entries = json.loads(Path(file_path).read_text(encoding="utf-8"))
            requests = [RecordedRequest(**entry) for entry in entries]
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, TypeError, ValidationError) as e:
            raise RestCoverageError(f"Failed to load recorded requests from {file_path}: {e}") from e

        matched = 0
        for req in requests:
            try:
                self.record_request(req.path, req.method, req.query, req.body)
            except UnknownEndpointError as e:
                logger.warning("%s", e)
                self.unmatched.append(f"{req.method.upper()} {req.path}")
                continue
            matched += 1
        return matched

    def _lookup(self, path: str, method: str) -> tuple[RequestStats, threading.Lock]:
        method = method.upper()
        try:
            return self.coverage_map[path][method], self._locks[(path, method)]
        except KeyError:
            raise UnknownEndpointError(path, method) from None

    def _unexpected(self, stats: RequestStats, location: str, field: str) -> None:
        logger.info("Undeclared %s field %s on %s %s", location, field, stats.method, stats.path)
        with self._counter_lock:
            self.unexpected[f"{stats.method} {stats.path} {location}#{field}"] += 1
