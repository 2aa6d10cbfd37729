"""Tests for the SpecDocument model."""

import pytest

from swagger_scaffold.spec import ParamLocation, SpecDocument, SpecError


class TestSpecDocument:
    def test_metadata(self, petstore):
        assert petstore.title == "Petstore"
        assert petstore.base_path == "/v1"

    def test_definitions_keep_declared_order(self, petstore):
        assert list(petstore.definitions) == ["Category", "Tag", "Pet", "Order", "User"]
        assert list(petstore.definitions["Order"].properties) == [
            "id", "petId", "quantity", "shipDate", "status", "complete", "contact",
        ]

    def test_references_are_stripped_to_names(self, petstore):
        pet = petstore.definitions["Pet"]
        assert pet.properties["category"].ref == "Category"
        assert pet.properties["tags"].items.ref == "Tag"

    def test_constraints_are_read(self, petstore):
        quantity = petstore.definitions["Order"].properties["quantity"]
        assert quantity.multiple_of == 2
        assert quantity.minimum == 1
        assert quantity.maximum == 10
        assert quantity.enum == [1, 2, 3]
        assert quantity.exclusive_minimum is False

    def test_operations_follow_path_then_method_order(self, petstore):
        ids = [op.operation_id for _, op in petstore.operations()]
        assert ids[:6] == [
            "addPet", "updatePet", "findPetsByStatus", "updatePetWithForm", "getPetById", "deletePet",
        ]

    def test_path_parameters_are_always_required(self, petstore_raw):
        petstore_raw["paths"]["/pet/{petId}"]["get"]["parameters"][0]["required"] = False
        doc = SpecDocument.from_dict(petstore_raw)
        param = doc.paths["/pet/{petId}"].operations["get"].parameters[0]
        assert param.location == ParamLocation.PATH
        assert param.required is True


class TestOperation:
    def test_body_parameter_moves_last(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["parameters"].append(
            {"in": "query", "name": "dryRun", "type": "boolean"}
        )
        doc = SpecDocument.from_dict(petstore_raw)
        op = doc.paths["/pet"].operations["post"]
        assert [p.name for p in op.ordered_parameters()] == ["dryRun", "body"]

    def test_route_group_is_first_tag(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["tags"] = ["pets", "store"]
        doc = SpecDocument.from_dict(petstore_raw)
        assert doc.paths["/pet"].operations["post"].route_group == "pets"

    def test_missing_tag_is_an_input_error(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["tags"] = []
        doc = SpecDocument.from_dict(petstore_raw)
        with pytest.raises(SpecError, match="has no tags"):
            doc.paths["/pet"].operations["post"].route_group

    def test_success_schema(self, petstore):
        assert petstore.paths["/pet/{petId}"].operations["get"].success_schema().ref == "Pet"
        assert petstore.paths["/pet"].operations["post"].success_schema() is None


class TestParsing:
    def test_path_level_parameters_are_inherited_and_overridable(self, petstore_raw):
        item = petstore_raw["paths"]["/store/order/{orderId}"]
        item["parameters"] = [{"in": "header", "name": "X-Trace", "type": "string"}]
        item["delete"]["parameters"].append({"in": "header", "name": "X-Trace", "type": "string", "required": True})
        doc = SpecDocument.from_dict(petstore_raw)

        get_params = doc.paths["/store/order/{orderId}"].operations["get"].parameters
        assert [p.name for p in get_params] == ["X-Trace", "orderId"]

        delete_params = doc.paths["/store/order/{orderId}"].operations["delete"].parameters
        trace = [p for p in delete_params if p.name == "X-Trace"]
        assert len(trace) == 1
        assert trace[0].required is True

    def test_shared_parameter_references(self, petstore_raw):
        petstore_raw["parameters"] = {"limitParam": {"in": "query", "name": "limit", "type": "integer"}}
        petstore_raw["paths"]["/pet/findByStatus"]["get"]["parameters"].append({"$ref": "#/parameters/limitParam"})
        doc = SpecDocument.from_dict(petstore_raw)
        params = doc.paths["/pet/findByStatus"].operations["get"].parameters
        assert params[-1].name == "limit"

    def test_unresolved_parameter_reference(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["parameters"] = [{"$ref": "#/parameters/nope"}]
        with pytest.raises(SpecError, match="Unresolved parameter reference"):
            SpecDocument.from_dict(petstore_raw)

    def test_unsupported_methods_are_recorded(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["patch"] = {"operationId": "patchPet", "tags": ["pets"]}
        doc = SpecDocument.from_dict(petstore_raw)
        assert doc.ignored == ["PATCH /pet"]
        assert "patch" not in doc.paths["/pet"].operations

    def test_missing_operation_id(self, petstore_raw):
        del petstore_raw["paths"]["/pet"]["put"]["operationId"]
        with pytest.raises(SpecError, match="has no operationId"):
            SpecDocument.from_dict(petstore_raw)

    def test_unknown_parameter_location(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["put"]["parameters"].append({"in": "cookie", "name": "session"})
        with pytest.raises(SpecError, match="unsupported location"):
            SpecDocument.from_dict(petstore_raw)

    def test_second_body_parameter(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["parameters"].append(
            {"in": "body", "name": "extra", "schema": {"$ref": "#/definitions/Tag"}}
        )
        with pytest.raises(SpecError, match="POST /pet declares more than one body parameter: body, extra"):
            SpecDocument.from_dict(petstore_raw)

    def test_inherited_body_counts_toward_the_limit(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["parameters"] = [
            {"in": "body", "name": "payload", "schema": {"$ref": "#/definitions/Tag"}}
        ]
        with pytest.raises(SpecError, match="more than one body parameter: payload, body"):
            SpecDocument.from_dict(petstore_raw)

    def test_openapi_3_is_rejected(self):
        with pytest.raises(SpecError, match="OpenAPI"):
            SpecDocument.from_dict({"openapi": "3.0.0", "paths": {}})

    def test_status_codes_become_strings(self, petstore_raw):
        petstore_raw["paths"]["/pet"]["post"]["responses"] = {200: {"description": "ok"}}
        doc = SpecDocument.from_dict(petstore_raw)
        assert list(doc.paths["/pet"].operations["post"].responses) == ["200"]
