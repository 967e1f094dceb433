"""Leaf-field counting over body schemas and the definitions they reference."""

import logging

logger = logging.getLogger(__name__)


def ref_name(ref: str) -> str:
    """Return the definition a $ref points to ('#/definitions/Pet' -> 'Pet')."""
    return str(ref).rsplit("/", 1)[-1]


def count_ref_params(schema: dict | None, definitions: dict) -> int:
    """Count the leaf fields reachable from a body schema.

    References are looked up by name in ``definitions``; a reference to a
    missing definition counts as zero. Properties that resolve to objects
    contribute their own leaf count, and arrays count their item schema
    once. A property whose reference is already being expanded on the
    current path counts as one leaf, so cyclic definitions terminate.
    """
    count, _ = _FieldCounter(definitions).fields(schema, frozenset())
    return count


class _FieldCounter:
    """One counting pass; remembers the leaf count of each finished definition."""

    def __init__(self, definitions: dict):
        self.definitions = definitions
        # only definitions whose expansion cut no cycle, their count is path independent
        self.counts: dict[str, int] = {}

    def fields(self, schema: object, visiting: frozenset) -> tuple[int, bool]:
        """Return the leaf count of ``schema`` and whether a cycle was cut below it."""
        if isinstance(schema, dict) and "$ref" in schema:
            name = ref_name(schema["$ref"])
            if name in self.counts:
                return self.counts[name], False
            if name in visiting:
                logger.debug("Cyclic reference to %s, not expanding again", name)
                return 0, True
            target = self.definitions.get(name)
            if target is None:
                logger.debug("Reference to undefined schema %s", name)
                return 0, False
            count, cut = self.fields(target, visiting | {name})
            if not cut:
                self.counts[name] = count
            return count, cut

        if not isinstance(schema, dict):
            return 0, False
        if "allOf" in schema:
            return self._sum(self.fields, schema["allOf"] or [], visiting)
        if "items" in schema:
            return self.fields(schema["items"], visiting)
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return 0, False
        return self._sum(self.property, properties.values(), visiting)

    def property(self, prop: object, visiting: frozenset) -> tuple[int, bool]:
        count, cut = self.fields(prop, visiting)
        if count:
            return count, cut
        # scalar, free-form object, or cut cycle: one leaf
        return (0 if self._is_dangling(prop) else 1), cut

    def _sum(self, count_one, schemas, visiting: frozenset) -> tuple[int, bool]:
        total, any_cut = 0, False
        for schema in schemas:
            count, cut = count_one(schema, visiting)
            total += count
            any_cut = any_cut or cut
        return total, any_cut

    def _is_dangling(self, prop: object) -> bool:
        while isinstance(prop, dict) and "items" in prop:
            prop = prop["items"]
        if not isinstance(prop, dict):
            return False
        if "$ref" in prop:
            return ref_name(prop["$ref"]) not in self.definitions
        parts = prop.get("allOf")
        return bool(parts) and all(self._is_dangling(part) for part in parts)
