"""Tests for Schema, Column and column spec parsing."""

import pytest

from colsieve.contracts import Column, Schema, SchemaConfigError, ValueType, parse_value_type


class TestColumnParse:
    """Column.parse() and spec aliases."""

    @pytest.mark.parametrize(
        ("spec", "name", "value_type"),
        [
            ("id: long", "id", ValueType.LONG),
            ("id: int", "id", ValueType.LONG),
            ("name: text", "name", ValueType.STRING),
            ("score: double", "score", ValueType.DOUBLE),
            ("flag: bool", "flag", ValueType.BOOLEAN),
            ("at: timestamp", "at", ValueType.TIMESTAMP),
            ("payload: JSON", "payload", ValueType.JSON),
            ("a:b: string", "a:b", ValueType.STRING),
            ("  spaced name : str ", "spaced name", ValueType.STRING),
        ],
    )
    def test_parses_spec(self, spec: str, name: str, value_type: ValueType) -> None:
        column = Column.parse(spec, 3)

        assert column == Column(name=name, index=3, value_type=value_type)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(SchemaConfigError, match="Unknown type 'decimal'"):
            Column.parse("price: decimal", 0)

    def test_missing_colon_rejected(self) -> None:
        with pytest.raises(SchemaConfigError, match="Expected format"):
            Column.parse("price", 0)

    def test_to_spec_uses_canonical_type(self) -> None:
        assert Column.parse("id: int", 0).to_spec() == "id: long"

    def test_parse_value_type_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Supported types"):
            parse_value_type("uuid")


class TestSchema:
    """Schema construction and lookup."""

    def test_from_specs_assigns_dense_indexes(self) -> None:
        schema = Schema.from_specs(["a: long", "b: string", "c: json"])

        assert [c.index for c in schema] == [0, 1, 2]
        assert schema.column_names == ("a", "b", "c")
        assert schema.size == len(schema) == 3

    def test_lookup_is_case_sensitive(self) -> None:
        schema = Schema.from_specs(["Name: string"])

        assert schema.lookup_column("Name").index == 0
        assert not schema.has_column("name")
        with pytest.raises(SchemaConfigError, match="'name' is not found"):
            schema.lookup_column("name")

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(SchemaConfigError, match="Duplicate column name 'a'"):
            Schema.from_specs(["a: long", "a: string"])

    def test_non_dense_indexes_rejected(self) -> None:
        with pytest.raises(SchemaConfigError, match="index 1 but is at position 0"):
            Schema((Column("a", 1, ValueType.LONG),))

    def test_builder_matches_from_specs(self) -> None:
        built = Schema.builder().add("id", ValueType.LONG).add("name", ValueType.STRING).build()

        assert built == Schema.from_specs(["id: long", "name: string"])

    def test_empty_schema(self) -> None:
        schema = Schema()

        assert schema.size == 0
        assert schema.to_specs() == []

    def test_schema_is_immutable(self) -> None:
        schema = Schema.from_specs(["a: long"])

        with pytest.raises(AttributeError):
            schema.columns = ()  # type: ignore[misc]

    def test_to_specs_round_trips(self) -> None:
        specs = ["id: long", "name: string", "score: double"]

        assert Schema.from_specs(specs).to_specs() == specs
