"""Tests for resolve_projection() and build_lookup_table()."""

import pytest

from colsieve.contracts import ConfigurationError, PreconditionViolationError, Schema, SelectionMode
from colsieve.core.projection import build_lookup_table, match_columns, resolve_projection
from colsieve.plugins.filters.remove_columns import RemoveColumnsConfig


def _directive(**kwargs) -> RemoveColumnsConfig:
    return RemoveColumnsConfig.from_dict(kwargs)


class TestDirectiveValidation:
    def test_both_remove_and_keep_rejected(self, scores_schema: Schema) -> None:
        with pytest.raises(ConfigurationError, match="must not be multi-select"):
            resolve_projection(scores_schema, _directive(remove=["name"], keep=["id"]))

    def test_neither_remove_nor_keep_rejected(self, scores_schema: Schema) -> None:
        with pytest.raises(ConfigurationError, match="Must require remove: or keep:"):
            resolve_projection(scores_schema, _directive())

    def test_ambiguity_checked_before_column_lookup(self, scores_schema: Schema) -> None:
        """Both lists set AND names unknown: the ambiguity error wins."""
        with pytest.raises(ConfigurationError, match="multi-select"):
            resolve_projection(scores_schema, _directive(remove=["ghost"], keep=["phantom"]))

    @pytest.mark.parametrize("mode", ["remove", "keep"])
    def test_unmatched_name_rejected(self, scores_schema: Schema, mode: str) -> None:
        with pytest.raises(ConfigurationError, match="Column 'ghost' doesn't exist in the schema"):
            resolve_projection(scores_schema, _directive(**{mode: ["id", "ghost"]}))


class TestRemoveMode:
    def test_remove_single_column(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(remove=["name"]))

        assert projection.mode is SelectionMode.REMOVE
        assert projection.output_schema.to_specs() == ["id: long", "score: double"]
        assert projection.lookup == (0, None, 1)
        assert projection.dropped_columns == 1

    def test_remove_all(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(remove=["score", "id", "name"]))

        assert projection.output_schema.size == 0
        assert projection.lookup == (None, None, None)

    def test_unmatched_accepted(self, scores_schema: Schema) -> None:
        projection = resolve_projection(
            scores_schema,
            _directive(remove=["ghost", "name", "ghost"], accept_unmatched_columns=True),
        )

        assert projection.output_schema.column_names == ("id", "score")
        assert projection.unmatched == ("ghost",)

    def test_empty_remove_list_passes_every_column_through(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(remove=[]))

        assert projection.mode is SelectionMode.REMOVE
        assert projection.output_schema == scores_schema
        assert projection.lookup == (0, 1, 2)


class TestKeepMode:
    def test_keep_single_column(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(keep=["id"]))

        assert projection.mode is SelectionMode.KEEP
        assert projection.output_schema.to_specs() == ["id: long"]
        assert projection.lookup == (0, None, None)

    def test_keep_order_follows_input_not_directive(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(keep=["score", "id"]))

        assert projection.output_schema.column_names == ("id", "score")
        assert projection.lookup == (0, None, 1)

    def test_keep_only_unmatched_yields_empty_schema(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(keep=["ghost"], accept_unmatched_columns=True))

        assert projection.output_schema.size == 0
        assert projection.lookup == (None, None, None)
        assert projection.unmatched == ("ghost",)

    def test_empty_keep_list_yields_empty_schema(self, scores_schema: Schema) -> None:
        projection = resolve_projection(scores_schema, _directive(keep=[]))

        assert projection.mode is SelectionMode.KEEP
        assert projection.output_schema.size == 0
        assert projection.lookup == (None, None, None)

    def test_duplicates_are_idempotent(self, scores_schema: Schema) -> None:
        with_dupes = resolve_projection(scores_schema, _directive(keep=["name", "id", "name"]))
        without = resolve_projection(scores_schema, _directive(keep=["name", "id"]))

        assert with_dupes == without


class TestMatchColumns:
    def test_returns_matched_set_and_unmatched_in_order(self, scores_schema: Schema) -> None:
        matched, unmatched = match_columns(scores_schema, ["b", "id", "a", "b"], accept_unmatched=True)

        assert matched == frozenset({"id"})
        assert unmatched == ("b", "a")


class TestBuildLookupTable:
    def test_maps_by_name(self) -> None:
        input_schema = Schema.from_specs(["a: long", "b: string", "c: double", "d: json"])
        output_schema = Schema.from_specs(["b: string", "d: json"])

        assert build_lookup_table(input_schema, output_schema) == (None, 0, None, 1)

    def test_unknown_output_column(self) -> None:
        with pytest.raises(PreconditionViolationError, match="'z' does not exist"):
            build_lookup_table(Schema.from_specs(["a: long"]), Schema.from_specs(["z: long"]))

    def test_retyped_output_column(self) -> None:
        with pytest.raises(PreconditionViolationError, match="'a' is string but input column is long"):
            build_lookup_table(Schema.from_specs(["a: long"]), Schema.from_specs(["a: string"]))
