"""Tests for point list parsers."""

import json

import pandas as pd
import pytest

from schema_elec.engine import classify_points
from schema_elec.models import SignalType
from schema_elec.parsers import (
    PointListParseError,
    PointListParser,
    load_point_records,
    normalize_column_name,
    parse_point_records_json,
)

RECORDS = [
    {"TypePoint": "DI", "NomEquipement": "PUMP1", "NomPoint": "RUN"},
    {"TypePoint": "AI", "NomEquipement": "TANK1", "NomPoint": "LEVEL"},
]


class TestJsonPointList:
    """Tests for JSON point lists."""

    def test_parse_bytes(self):
        """Test parsing raw bytes."""
        assert parse_point_records_json(json.dumps(RECORDS).encode()) == RECORDS

    def test_byte_order_mark(self):
        """Test a UTF-8 BOM is ignored."""
        data = b"\xef\xbb\xbf" + json.dumps(RECORDS).encode("utf-8")
        assert parse_point_records_json(data) == RECORDS

    def test_text_with_bom_and_whitespace(self):
        """Test text input with BOM and surrounding whitespace."""
        assert parse_point_records_json("\ufeff  []\n") == []

    def test_not_an_array(self):
        """Test objects are rejected."""
        with pytest.raises(PointListParseError):
            parse_point_records_json(b'{"TypePoint": "DI"}')

    def test_invalid_json(self):
        """Test malformed JSON is rejected."""
        with pytest.raises(PointListParseError):
            parse_point_records_json(b"[{")

    def test_not_utf8(self):
        """Test non UTF-8 bytes are rejected."""
        with pytest.raises(PointListParseError):
            parse_point_records_json(b"\xff\xfe[]")

    def test_load_file(self, tmp_path):
        """Test loading a JSON file."""
        path = tmp_path / "points.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps(RECORDS).encode("utf-8"))
        assert load_point_records(str(path)) == RECORDS


class TestExcelPointList:
    """Tests for Excel point lists."""

    def test_load_excel(self, tmp_path):
        """Test Excel columns are mapped to record keys."""
        path = tmp_path / "points.xlsx"
        pd.DataFrame({
            "Type Point": ["DI", "AO", None],
            "Equipment Name": ["PUMP1", "VFD1", None],
            "Point Name": ["RUN", "SPEED", None],
            "Comment": ["checked", None, None],
        }).to_excel(path, index=False)

        records = load_point_records(str(path))

        assert len(records) == 2
        assert records[0]["signalType"] == "DI"
        assert records[0]["equipmentName"] == "PUMP1"
        assert records[1]["pointName"] == "SPEED"
        assert records[0]["Comment"] == "checked"
        assert records[1]["Comment"] is None

    def test_numeric_names_with_blank_cell(self, tmp_path):
        """Test numeric names stay integers when the column has a blank cell."""
        path = tmp_path / "points.xlsx"
        pd.DataFrame({
            "TypePoint": ["DI", "DI"],
            "NomEquipement": ["PUMP", "PUMP"],
            "NomPoint": [101, None],
        }).to_excel(path, index=False)

        records = load_point_records(str(path))

        assert records[0]["pointName"] == "101"
        assert records[1]["pointName"] is None
        points = classify_points(records[:1])
        assert points[SignalType.DI][0].display_name == "PUMP - 101"

    def test_sheet_name(self, tmp_path):
        """Test reading a named sheet."""
        path = tmp_path / "points.xlsx"
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({"A": [1]}).to_excel(writer, sheet_name="Notes", index=False)
            pd.DataFrame({
                "TypePoint": ["DO"], "NomEquipement": ["FAN"], "NomPoint": ["START"]
            }).to_excel(writer, sheet_name="Points", index=False)

        records = PointListParser(str(path)).parse(sheet_name="Points")
        assert records == [{"signalType": "DO", "equipmentName": "FAN", "pointName": "START"}]

    def test_missing_sheet(self, tmp_path):
        """Test an unknown sheet is reported."""
        path = tmp_path / "points.xlsx"
        pd.DataFrame({"TypePoint": ["DI"]}).to_excel(path, index=False)
        with pytest.raises(PointListParseError):
            load_point_records(str(path), sheet_name="Nope")


class TestPointListParser:
    """Tests for file checks and column names."""

    def test_missing_file(self, tmp_path):
        """Test missing files are rejected."""
        with pytest.raises(PointListParseError):
            PointListParser(str(tmp_path / "missing.json"))

    def test_invalid_extension(self, tmp_path):
        """Test unsupported file types are rejected."""
        path = tmp_path / "points.csv"
        path.write_text("TypePoint\nDI\n")
        with pytest.raises(PointListParseError):
            PointListParser(str(path))

    def test_normalize_column_name(self):
        """Test column name aliases."""
        assert normalize_column_name(" TypePoint ") == "signalType"
        assert normalize_column_name("signal_type") == "signalType"
        assert normalize_column_name("NomEquipement") == "equipmentName"
        assert normalize_column_name("Point Name") == "pointName"
        assert normalize_column_name("Comment") == "Comment"
