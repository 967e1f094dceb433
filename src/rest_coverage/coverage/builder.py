"""Build the coverage map for every declared path and method of a document."""

import logging
from pathlib import Path

from rest_coverage.parser.base import CoverageMap, RequestStats
from rest_coverage.parser.swagger import SwaggerDocument, load_document

from .params import add_swagger_params

logger = logging.getLogger(__name__)


def get_rest_api(document_path: str | Path, uri_filter: str = "") -> CoverageMap:
    """Load an API document and build its coverage map.

    ``uri_filter`` keeps only the path equal to it; an empty filter keeps
    every path. Raises DocumentLoadError when the document cannot be loaded.
    """
    document = load_document(document_path)
    return build_rest_api(document, uri_filter)


def build_rest_api(document: SwaggerDocument, uri_filter: str = "") -> CoverageMap:
    """Build a fresh coverage map from an already loaded document."""
    rest_api: CoverageMap = {}
    definitions = document.definitions

    for path, methods in document.operations().items():
        if uri_filter and path != uri_filter:
            continue
        for method in methods:
            stats = RequestStats(path=path, method=method, body=None, query={})
            add_swagger_params(stats, document.params_for(method, path), definitions)
            rest_api.setdefault(path, {})[method] = stats

    if uri_filter and not rest_api:
        logger.info("No endpoints match filter %s in %s", uri_filter, document.source)
    logger.debug(
        "Built coverage map with %d endpoints from %s",
        sum(len(methods) for methods in rest_api.values()),
        document.source,
    )
    return rest_api
