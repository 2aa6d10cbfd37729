"""Tests for Go model emission."""

import pytest

from swagger_scaffold.codegen.core.config import GeneratorConfig
from swagger_scaffold.codegen.core.generator import generate_code
from swagger_scaffold.codegen.core.rules import ValidationRuleCompiler
from swagger_scaffold.codegen.core.schema import SchemaResolver
from swagger_scaffold.codegen.languages.go import GinGenerator, ModelEmitter
from swagger_scaffold.codegen.languages.go.syntax import align_columns, go_raw, group_imports


@pytest.fixture
def emit(petstore, registry, type_mapper, config):
    resolver = SchemaResolver(petstore.definitions, registry, type_mapper)
    emitter = ModelEmitter(ValidationRuleCompiler(registry), config)

    def build(name):
        return emitter.emit(resolver.resolve(name))

    return build


@pytest.fixture
def files(petstore):
    result = generate_code(GinGenerator(), petstore)
    assert result.success, result.error_message
    return result.files


class TestStruct:
    def test_columns_are_aligned(self, emit):
        body = emit("Order").body
        assert '\tId       int64     `json:"id" binding:"required"`' in body
        assert '\tShipDate time.Time `json:"shipDate,omitempty"`' in body
        assert '\tComplete bool      `json:"complete,omitempty"`' in body

    def test_model_and_array_field_types(self, emit):
        body = emit("Pet").body
        assert "\tCategory  Category `json:\"category,omitempty\"`" in body
        assert "\tPhotoUrls []string `json:\"photoUrls\" binding:\"required\"`" in body
        assert "\tTags      []Tag    `json:\"tags,omitempty\"`" in body

    def test_property_description_becomes_comment(self, emit):
        lines = emit("Pet").body.splitlines()
        index = lines.index("\t// pet status in the store")
        assert lines[index + 1].startswith("\tStatus ")

    def test_comments_can_be_disabled(self, petstore, registry, type_mapper):
        resolver = SchemaResolver(petstore.definitions, registry, type_mapper)
        emitter = ModelEmitter(ValidationRuleCompiler(registry), GeneratorConfig(add_comments=False))
        assert "// pet status" not in emitter.emit(resolver.resolve("Pet")).body

    def test_output_path(self, emit):
        model = emit("Order")
        assert model.path == "models/order.go"
        assert model.package == "models"


class TestValidate:
    def test_validate_calls_only_validating_fields_in_order(self, emit):
        body = emit("Order").body
        calls = [
            line.strip()
            for line in body.splitlines()
            if line.strip().startswith("if err := m.validate") and line.strip().endswith("(); err != nil {")
        ]
        assert calls == [
            "if err := m.validatePetId(); err != nil {",
            "if err := m.validateQuantity(); err != nil {",
            "if err := m.validateStatus(); err != nil {",
            "if err := m.validateContact(); err != nil {",
        ]
        assert "validateId()" not in body
        assert "validateComplete()" not in body

    def test_record_without_constraints(self, emit):
        body = emit("Category").body
        assert "func (m *Category) Validate() error {\n\treturn nil\n}\n" in body
        assert "func (m *Category) validate" not in body

    def test_optional_numeric_guard(self, emit):
        body = emit("Order").body
        assert "func (m *Order) validatePetId() error {\n\tif m.PetId == 0 {\n\t\treturn nil\n\t}\n" in body

    def test_optional_text_guard(self, emit):
        assert '\tif m.Status == "" {' in emit("Order").body

    def test_required_field_has_no_guard(self, emit):
        body = emit("Pet").body
        expected = (
            "func (m *Pet) validateName() error {\n"
            '\tif err := validate.MaxLength("name", "body", string(m.Name), 30); err != nil {\n'
        )
        assert expected in body

    def test_step_order_and_arguments(self, emit):
        body = emit("Order").body
        steps = [
            'validate.MultipleOf("quantity", "body", float64(m.Quantity), 2)',
            'validate.Minimum("quantity", "body", float64(m.Quantity), 1, false)',
            'validate.Maximum("quantity", "body", float64(m.Quantity), 10, false)',
            'm.validateQuantityEnum("quantity", "body", m.Quantity)',
        ]
        positions = [body.index(step) for step in steps]
        assert positions == sorted(positions)

    def test_exclusive_bound(self, petstore_raw, registry, type_mapper, config):
        from swagger_scaffold.spec import SpecDocument

        petstore_raw["definitions"]["Order"]["properties"]["petId"]["exclusiveMinimum"] = True
        doc = SpecDocument.from_dict(petstore_raw)
        resolver = SchemaResolver(doc.definitions, registry, type_mapper)
        body = ModelEmitter(ValidationRuleCompiler(registry), config).emit(resolver.resolve("Order")).body
        assert 'validate.Minimum("petId", "body", float64(m.PetId), 10, true)' in body

    def test_pattern_uses_raw_literal(self, emit):
        assert 'validate.Pattern("name", "body", string(m.Name), `^[a-zA-Z]+$`)' in emit("Pet").body

    def test_format_predicate(self, emit):
        body = emit("Order").body
        assert "\tif !govalidator.IsEmail(m.Contact) {" in body
        assert '\t\treturn errors.InvalidType("contact", "body", "email", m.Contact)' in body


class TestEnumCache:
    def test_cache_variables(self, emit):
        body = emit("Order").body
        assert "\torderQuantityEnum     []interface{}" in body
        assert "\torderQuantityEnumOnce sync.Once" in body
        assert "\torderQuantityEnumErr  error" in body

    def test_enum_function(self, emit):
        body = emit("Order").body
        assert "func (m *Order) validateQuantityEnum(path, location string, value int32) error {" in body
        assert "\torderQuantityEnumOnce.Do(func() {" in body
        assert "\t\tif err := json.Unmarshal([]byte(`[1,2,3]`), &res); err != nil {" in body
        assert "\tif err := validate.Enum(path, location, value, orderQuantityEnum); err != nil {" in body

    def test_text_enum_literals(self, emit):
        body = emit("Pet").body
        assert '[]byte(`["available","pending","sold"]`)' in body
        assert "func (m *Pet) validateStatusEnum(path, location string, value string) error {" in body

    def test_enum_cache_is_declared_once_per_field(self, emit):
        assert emit("Order").body.count("orderQuantityEnumOnce sync.Once") == 1


class TestImports:
    def test_order_imports(self, emit):
        assert emit("Order").imports == {
            "encoding/json",
            "sync",
            "time",
            "github.com/aiyi/swagger-gin/errors",
            "github.com/aiyi/swagger-gin/validate",
            "github.com/asaskevich/govalidator",
        }

    def test_no_imports_without_validators(self, emit):
        assert emit("Tag").imports == set()

    def test_grouping(self):
        groups = group_imports({"sync", "github.com/x/y", "encoding/json"})
        assert groups == [['"encoding/json"', '"sync"'], ['"github.com/x/y"']]
        assert group_imports(set()) == []


class TestRenderedFile:
    def test_header_and_import_block(self, files):
        text = files["models/order.go"]
        assert text.startswith("// Code generated by swagger-scaffold. DO NOT EDIT.\n\npackage models\n\nimport (\n")
        block = text[text.index("import (") : text.index(")\n") + 2]
        assert block == (
            "import (\n"
            '\t"encoding/json"\n'
            '\t"sync"\n'
            '\t"time"\n'
            "\n"
            '\t"github.com/aiyi/swagger-gin/errors"\n'
            '\t"github.com/aiyi/swagger-gin/validate"\n'
            '\t"github.com/asaskevich/govalidator"\n'
            ")\n"
        )

    def test_file_without_imports(self, files):
        text = files["models/category.go"]
        assert "package models\n\ntype Category struct {" in text
        assert "import" not in text

    def test_every_definition_gets_a_file(self, files):
        models = sorted(path for path in files if path.startswith("models/"))
        assert models == [
            "models/category.go",
            "models/order.go",
            "models/pet.go",
            "models/tag.go",
            "models/user.go",
        ]

    def test_files_end_with_one_newline(self, files):
        for text in files.values():
            assert text.endswith("}\n")
            assert "\n\n\n" not in text


class TestSyntaxHelpers:
    def test_raw_literal_falls_back_when_it_holds_a_backtick(self):
        assert go_raw("a`b") == '"a`b"'
        assert go_raw("^a+$") == "`^a+$`"

    def test_align_columns(self):
        assert align_columns([["Id", "int64", "`x`"], ["Name", "string", "`y`"]]) == [
            "Id   int64  `x`",
            "Name string `y`",
        ]
