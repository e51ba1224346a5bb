#!/usr/bin/env python
"""
Pipeline Tests: Integration, Output, Settings and CLI

Tests for:
- End-to-end shape building from Overpass elements
- Component failure isolation
- GeoJSON output
- Settings loading
- Command-line parsing and full file-to-file runs
"""

import argparse
import json
import sys
import tempfile
from pathlib import Path
from unittest import mock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from overpass_shapes import (
    PipelineConfig,
    build_map_shapes,
    build_map_shapes_from_elements,
    load_settings,
    run_pipeline,
)
from overpass_shapes.cli import main, parse_args
from overpass_shapes.constants import ShapeKind
from overpass_shapes.features import NodeFeature
from overpass_shapes.output import (
    generate_geojson_filename,
    generate_json_filename,
    shapes_to_feature_collection,
    write_shapes_to_geojson,
    write_shapes_to_json,
)
from overpass_shapes.settings import SettingsError
from overpass_shapes.shapes import MapShapes


def sample_elements():
    """A small Overpass result: a cafe, a building, a road, a broken way and two relations."""
    return [
        {"type": "node", "id": 1, "lat": 52.500, "lon": 13.400},
        {"type": "node", "id": 2, "lat": 52.500, "lon": 13.402},
        {"type": "node", "id": 3, "lat": 52.502, "lon": 13.402},
        {"type": "node", "id": 4, "lat": 52.502, "lon": 13.400},
        {"type": "node", "id": 5, "lat": 52.501, "lon": 13.401,
         "tags": {"amenity": "cafe", "name": "Eck"}},
        {"type": "way", "id": 10, "nodes": [1, 2, 3, 4, 1], "tags": {"building": "yes"}},
        {"type": "way", "id": 11, "nodes": [1, 2, 99], "tags": {"highway": "service"}},
        {"type": "way", "id": 12, "tags": {"highway": "residential"},
         "geometry": [{"lat": 52.49, "lon": 13.39}, {"lat": 52.51, "lon": 13.41}]},
        {"type": "relation", "id": 20,
         "bounds": {"minlat": 52.40, "minlon": 13.30, "maxlat": 52.41, "maxlon": 13.31},
         "tags": {"type": "multipolygon", "leisure": "park"},
         "members": [
             {"type": "way", "ref": 200, "role": "outer",
              "geometry": [{"lat": 52.40, "lon": 13.30}, {"lat": 52.40, "lon": 13.31},
                           {"lat": 52.41, "lon": 13.31}]},
             {"type": "way", "ref": 201, "role": "outer",
              "geometry": [{"lat": 52.41, "lon": 13.31}, {"lat": 52.41, "lon": 13.30},
                           {"lat": 52.40, "lon": 13.30}]},
         ]},
        {"type": "relation", "id": 21,
         "bounds": {"minlat": 52.6, "minlon": 13.5, "maxlat": 52.6001, "maxlon": 13.5001},
         "tags": {"type": "site", "name": "Kiosk"},
         "members": []},
    ]


class TestBuildMapShapes:
    """End-to-end tests on parsed elements."""

    def test_sample(self):
        """Test markers, polygons and flags for the sample result."""
        shapes = build_map_shapes_from_elements(sample_elements())

        assert len(shapes.markers) == 1
        assert shapes.markers[0].tags["name"] == "Eck"

        by_id = {p.source_id: p for p in shapes.polygons}
        # Way 11 references missing node 99
        assert set(by_id) == {10, 12, 20, 21}

        assert by_id[10].closed is True
        assert by_id[12].closed is False
        assert by_id[20].closed is True
        assert by_id[20].coordinates[0] == by_id[20].coordinates[-1]
        assert by_id[21].is_very_small is True
        assert by_id[10].is_very_small is False
        assert shapes.warnings == []
        print("  [PASS] Sample result")

    def test_bounds_cover_everything(self):
        """Test that bounds include markers, ways and relation rings."""
        shapes = build_map_shapes_from_elements(sample_elements())
        box = shapes.bounds

        assert box.min_lat == 52.40
        assert box.min_lon == 13.30
        assert box.max_lat == 52.6001
        assert box.max_lon == 13.5001
        assert box.min_lat <= shapes.center[0] <= box.max_lat
        print("  [PASS] Bounds cover all shapes")

    def test_empty_input(self):
        """Test that empty input produces empty output without bounds."""
        shapes = build_map_shapes([])
        assert shapes.is_empty
        assert shapes.bounds is None
        assert shapes.center == (0.0, 0.0)
        print("  [PASS] Empty input")

    def test_relations_can_be_skipped(self):
        """Test the include_relations switch."""
        config = PipelineConfig(include_relations=False)
        shapes = build_map_shapes_from_elements(sample_elements(), config)
        assert {p.source_id for p in shapes.polygons} == {10, 12}
        print("  [PASS] Relations skipped")

    def test_component_failure_is_contained(self):
        """Test that a failing component yields an empty part plus a warning."""
        with mock.patch(
            "overpass_shapes.pipeline.build_relations",
            side_effect=RuntimeError("boom"),
        ):
            shapes = build_map_shapes_from_elements(sample_elements())

        assert {p.source_id for p in shapes.polygons} == {10, 12}
        assert len(shapes.markers) == 1
        assert any("Relation assembly failed" in w for w in shapes.warnings)
        print("  [PASS] Component failure contained")

    def test_malformed_elements_do_not_fail(self):
        """Test that junk in the element list is skipped."""
        elements = sample_elements() + [
            {"type": "way", "id": 13, "nodes": "not-a-list"},
            {"type": "node", "id": 6},
            None,
        ]
        shapes = build_map_shapes_from_elements(elements)
        assert len(shapes.polygons) == 4
        print("  [PASS] Malformed elements skipped")

    def test_non_feature_does_not_clear_results(self):
        """Test that a stray raw element among features leaves the rest intact."""
        features = [
            NodeFeature(1, 1.0, 2.0, tags={"amenity": "cafe"}),
            {"type": "node"},
        ]
        shapes = build_map_shapes(features)

        assert len(shapes.markers) == 1
        assert shapes.markers[0].coordinate == (1.0, 2.0)
        assert shapes.warnings == []
        print("  [PASS] Non-feature skipped without losing markers")


class TestGeoJSON:
    """Tests for GeoJSON output."""

    def test_feature_collection(self):
        """Test geometry types, properties and centroid features."""
        shapes = build_map_shapes_from_elements(sample_elements())
        collection = shapes_to_feature_collection(shapes)

        assert collection["type"] == "FeatureCollection"
        assert collection["bbox"] == shapes.bounds.to_list()

        kinds = [f["properties"]["kind"] for f in collection["features"]]
        assert kinds.count(ShapeKind.MARKER) == 1
        assert kinds.count(ShapeKind.AREA) == 3
        assert kinds.count(ShapeKind.PATH) == 1
        assert kinds.count(ShapeKind.CENTROID) == 1

        building = next(
            f for f in collection["features"]
            if f["properties"].get("building") == "yes"
        )
        assert building["geometry"]["type"] == "Polygon"
        assert building["properties"]["closed"] is True
        # GeoJSON is (lon, lat)
        assert tuple(building["geometry"]["coordinates"][0][0]) == (13.400, 52.500)

        marker = collection["features"][0]
        assert marker["geometry"]["type"] == "Point"
        assert tuple(marker["geometry"]["coordinates"]) == (13.401, 52.501)
        print("  [PASS] Feature collection")

    def test_no_bbox_when_empty(self):
        """Test that an empty result has no bbox member."""
        collection = shapes_to_feature_collection(MapShapes())
        assert collection["features"] == []
        assert "bbox" not in collection
        print("  [PASS] No bbox for empty result")

    def test_write_file(self):
        """Test writing GeoJSON to disk."""
        shapes = build_map_shapes_from_elements(sample_elements())
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_geojson_filename("/data/berlin.json", tmpdir)
            assert path.endswith("berlin_shapes.geojson")

            written = write_shapes_to_geojson(shapes, path)
            with open(written) as f:
                data = json.load(f)
        assert len(data["features"]) == 6
        print("  [PASS] GeoJSON file written")


class TestJSONSummary:
    """Tests for the plain JSON output."""

    def test_write_file(self):
        """Test markers, polygon flags and framing in the written summary."""
        shapes = build_map_shapes_from_elements(sample_elements())
        with tempfile.TemporaryDirectory() as tmpdir:
            path = generate_json_filename("/data/berlin.json", tmpdir)
            assert path.endswith("berlin_shapes.json")

            written = write_shapes_to_json(shapes, path)
            with open(written) as f:
                data = json.load(f)

        assert set(data) == {"markers", "polygons", "bounds", "center", "warnings"}
        assert data["bounds"] == [13.30, 52.40, 13.5001, 52.6001]
        assert data["center"] == list(shapes.center)
        assert data["warnings"] == []

        assert data["markers"] == [
            {"lat": 52.501, "lon": 13.401, "tags": {"amenity": "cafe", "name": "Eck"}}
        ]

        by_id = {p["source_id"]: p for p in data["polygons"]}
        assert set(by_id) == {10, 12, 20, 21}
        assert by_id[10]["closed"] is True
        assert by_id[10]["tags"] == {"building": "yes"}
        assert by_id[10]["coordinates"][0] == [52.500, 13.400]
        assert by_id[12]["closed"] is False
        assert by_id[21]["very_small"] is True
        assert by_id[10]["very_small"] is False
        print("  [PASS] JSON summary written")

    def test_empty_summary(self):
        """Test the summary of an empty result."""
        data = MapShapes().to_dict()
        assert data["markers"] == [] and data["polygons"] == []
        assert data["bounds"] is None
        assert data["center"] == [0.0, 0.0]
        print("  [PASS] Empty summary")


class TestSettings:
    """Tests for settings loading."""

    def test_defaults_without_file(self):
        """Test that the bundled settings match the defaults."""
        config = load_settings()
        assert config == PipelineConfig()
        print("  [PASS] Bundled settings")

    def test_load_yaml(self):
        """Test overriding values from a YAML file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "settings.yaml"
            path.write_text(
                "shapes:\n"
                "  very_small_span_deg: 0.001\n"
                "  merge_roles: [outer]\n"
                "  infer_closed_from_geometry: true\n"
                "  unknown_option: 3\n"
            )
            config = load_settings(str(path))

        assert config.very_small_span_deg == 0.001
        assert config.merge_roles == ("outer",)
        assert config.infer_closed_from_geometry is True
        assert config.include_relations is True
        print("  [PASS] YAML settings")

    def test_invalid_settings(self):
        """Test that bad values and files raise SettingsError."""
        with tempfile.TemporaryDirectory() as tmpdir:
            bad_value = Path(tmpdir) / "bad_value.yaml"
            bad_value.write_text("include_relations: maybe\n")
            with pytest.raises(SettingsError):
                load_settings(str(bad_value))

            not_mapping = Path(tmpdir) / "list.yaml"
            not_mapping.write_text("- one\n- two\n")
            with pytest.raises(SettingsError):
                load_settings(str(not_mapping))

        with pytest.raises(SettingsError):
            load_settings("/nonexistent/settings.yaml")
        print("  [PASS] Invalid settings rejected")


class TestCLI:
    """Tests for argument parsing and full runs."""

    def test_parse_args(self):
        """Test parsing valid arguments."""
        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = Path(tmpdir) / "response.json"
            input_path.write_text("{}")
            args = parse_args([
                "-i", str(input_path), "-o", str(Path(tmpdir) / "out"),
                "--no-relations", "--very-small-span", "0.001",
            ])
        assert args.no_relations is True
        assert args.very_small_span == 0.001
        assert args.verbose is False
        print("  [PASS] Argument parsing")

    def test_missing_input(self):
        """Test that a missing input file is a usage error."""
        with pytest.raises(SystemExit):
            parse_args(["-i", "/nonexistent/response.json", "-o", "/tmp/out"])
        print("  [PASS] Missing input rejected")

    def test_run_pipeline(self):
        """Test a full file-to-file run."""
        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = Path(tmpdir) / "berlin.json"
            input_path.write_text(json.dumps({"elements": sample_elements()}))
            output_dir = Path(tmpdir) / "out"

            args = argparse.Namespace(
                input=str(input_path),
                output=str(output_dir),
                settings=None,
                very_small_span=None,
                no_relations=False,
                infer_closed=False,
                verbose=False,
            )
            result = run_pipeline(args)

            assert result.total_elements == 10
            assert result.total_markers == 1
            assert result.total_polygons == 4
            assert result.geojson_path is not None
            assert Path(result.geojson_path).exists()
            assert result.json_path is not None
            with open(result.json_path) as f:
                summary = json.load(f)
            assert len(summary["polygons"]) == 4
        print("  [PASS] Full pipeline run")

    def test_run_pipeline_no_shapes(self):
        """Test that an empty response writes nothing and warns."""
        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = Path(tmpdir) / "empty.json"
            input_path.write_text(json.dumps({"elements": []}))

            args = argparse.Namespace(
                input=str(input_path),
                output=str(Path(tmpdir) / "out"),
                settings=None,
                very_small_span=None,
                no_relations=False,
                infer_closed=False,
                verbose=True,
            )
            result = run_pipeline(args)

        assert result.geojson_path is None
        assert result.json_path is None
        assert "No shapes extracted" in result.warnings
        print("  [PASS] Empty run")

    def _run_main(self, argv):
        with mock.patch.object(sys, "argv", ["overpass-shapes"] + argv):
            with pytest.raises(SystemExit) as exc_info:
                main()
        return exc_info.value.code

    def test_main_reports_invalid_response(self, capsys):
        """Test that an unreadable response exits with its own message."""
        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = Path(tmpdir) / "broken.json"
            input_path.write_text("{not json")
            code = self._run_main(["-i", str(input_path), "-o", str(Path(tmpdir) / "out")])

        assert code == 1
        assert "Invalid Overpass response:" in capsys.readouterr().out
        print("  [PASS] Invalid response reported")

    def test_main_reports_settings_error(self, capsys):
        """Test that a bad settings file exits with its own message."""
        with tempfile.TemporaryDirectory() as tmpdir:
            input_path = Path(tmpdir) / "berlin.json"
            input_path.write_text(json.dumps({"elements": sample_elements()}))
            settings_path = Path(tmpdir) / "settings.yaml"
            settings_path.write_text("include_relations: maybe\n")
            code = self._run_main([
                "-i", str(input_path), "-o", str(Path(tmpdir) / "out"),
                "--settings", str(settings_path),
            ])

        assert code == 1
        assert "Settings error:" in capsys.readouterr().out
        print("  [PASS] Settings error reported")
