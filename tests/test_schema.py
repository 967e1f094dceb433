import time
from pathlib import Path

from rest_coverage.coverage.schema import count_ref_params, ref_name
from rest_coverage.parser.swagger import load_document

FIXTURES = Path(__file__).parent / "fixtures"


class TestRefName:
    def test_swagger_definition(self):
        assert ref_name("#/definitions/Pet") == "Pet"

    def test_openapi_component(self):
        assert ref_name("#/components/schemas/NewPet") == "NewPet"


class TestCountRefParams:
    def test_count_params_from_referenced_models(self):
        document = load_document(FIXTURES / "petstore.json")
        params = document.params_for("POST", "/pets")
        assert count_ref_params(params["body#Pet"].body_schema, document.definitions) == 6

    def test_empty_definitions(self):
        document = load_document(FIXTURES / "petstore.json")
        params = document.params_for("POST", "/pets")
        assert count_ref_params(params["body#Pet"].body_schema, {}) == 0

    def test_flat_definition(self):
        definitions = {"Tag": {"type": "object", "properties": {"id": {}, "name": {}, "color": {}}}}
        assert count_ref_params({"$ref": "#/definitions/Tag"}, definitions) == 3

    def test_inline_object(self):
        schema = {"type": "object", "properties": {"a": {"type": "string"}, "b": {"type": "integer"}}}
        assert count_ref_params(schema, {}) == 2

    def test_array_counts_items_once(self):
        definitions = {"Tag": {"type": "object", "properties": {"id": {}, "name": {}}}}
        schema = {"type": "array", "items": {"$ref": "#/definitions/Tag"}}
        assert count_ref_params(schema, definitions) == 2

    def test_repeated_reference_counted_each_time(self):
        definitions = {
            "Point": {"properties": {"x": {}, "y": {}}},
            "Line": {"properties": {"start": {"$ref": "#/definitions/Point"}, "end": {"$ref": "#/definitions/Point"}}},
        }
        assert count_ref_params({"$ref": "#/definitions/Line"}, definitions) == 4

    def test_property_referencing_scalar_definition(self):
        definitions = {
            "Status": {"type": "string", "enum": ["on", "off"]},
            "Device": {"properties": {"id": {}, "status": {"$ref": "#/definitions/Status"}}},
        }
        assert count_ref_params({"$ref": "#/definitions/Device"}, definitions) == 2

    def test_dangling_property_reference(self):
        definitions = {"Device": {"properties": {"id": {}, "owner": {"$ref": "#/definitions/Owner"}}}}
        assert count_ref_params({"$ref": "#/definitions/Device"}, definitions) == 1

    def test_all_of(self):
        document = load_document(FIXTURES / "petstore3.yaml")
        schema = {"$ref": "#/components/schemas/NewPet"}
        assert count_ref_params(schema, document.definitions) == 5

    def test_self_reference_terminates(self):
        definitions = {
            "Node": {
                "properties": {
                    "value": {"type": "integer"},
                    "parent": {"$ref": "#/definitions/Node"},
                    "children": {"type": "array", "items": {"$ref": "#/definitions/Node"}},
                }
            }
        }
        assert count_ref_params({"$ref": "#/definitions/Node"}, definitions) == 3

    def test_mutual_reference_terminates(self):
        definitions = {
            "A": {"properties": {"name": {}, "b": {"$ref": "#/definitions/B"}}},
            "B": {"properties": {"id": {}, "a": {"$ref": "#/definitions/A"}}},
        }
        # A.name + B.id + B.a (cut cycle)
        assert count_ref_params({"$ref": "#/definitions/A"}, definitions) == 3

    def test_scalar_body_has_no_fields(self):
        assert count_ref_params({"type": "string"}, {}) == 0
        assert count_ref_params({"type": "object"}, {}) == 0
        assert count_ref_params(None, {}) == 0

    def test_dangling_all_of_property(self):
        definitions = {
            "Device": {
                "properties": {
                    "id": {},
                    "owner": {"allOf": [{"$ref": "#/definitions/Owner"}]},
                }
            }
        }
        assert count_ref_params({"$ref": "#/definitions/Device"}, definitions) == 1

    def test_deep_shared_references_are_counted_quickly(self):
        depth = 23
        definitions = {
            f"D{i}": {
                "properties": {
                    "a": {"$ref": f"#/definitions/D{i + 1}"},
                    "b": {"$ref": f"#/definitions/D{i + 1}"},
                }
            }
            for i in range(depth - 1)
        }
        definitions[f"D{depth - 1}"] = {"properties": {"leaf": {"type": "string"}}}

        start = time.perf_counter()
        count = count_ref_params({"$ref": "#/definitions/D0"}, definitions)
        elapsed = time.perf_counter() - start

        assert count == 2 ** (depth - 1)
        assert elapsed < 1.0

    def test_shared_reference_inside_cycle(self):
        definitions = {
            "Tree": {
                "properties": {
                    "meta": {"$ref": "#/definitions/Meta"},
                    "left": {"$ref": "#/definitions/Tree"},
                    "right": {"$ref": "#/definitions/Tree"},
                }
            },
            "Meta": {"properties": {"created": {}, "updated": {}}},
        }
        # meta (2) + left and right cut to one leaf each
        assert count_ref_params({"$ref": "#/definitions/Tree"}, definitions) == 4
