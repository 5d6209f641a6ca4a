"""Point list loader for JSON exports and Excel sheets."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd


class PointListParseError(Exception):
    """Exception raised for point list loading errors."""
    pass


# Standard record keys and their column name variations
COLUMN_ALIASES = {
    "signalType": ["signal type", "signal_type", "signaltype", "typepoint", "type point", "type", "io type"],
    "equipmentName": ["equipment name", "equipment_name", "equipmentname", "nomequipement", "equipment", "equipement"],
    "pointName": ["point name", "point_name", "pointname", "nompoint", "point"],
}

JSON_EXTENSIONS = ['.json']
EXCEL_EXTENSIONS = ['.xlsx', '.xls']


def normalize_column_name(column: str) -> str:
    """Normalize a column name to its standard record key."""
    col_lower = str(column).strip().lower()

    for standard_name, aliases in COLUMN_ALIASES.items():
        if col_lower == standard_name.lower() or col_lower in aliases:
            return standard_name

    return column


def parse_point_records_json(data: Union[bytes, str]) -> List[Dict[str, Any]]:
    """
    Parse a JSON point list held in memory.

    A UTF-8 byte order mark and surrounding whitespace are tolerated.

    Args:
        data: JSON document, raw bytes or text

    Returns:
        List of point records

    Raises:
        PointListParseError: If the document is not a JSON array
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise PointListParseError(f"Point list is not UTF-8: {e}") from e
    text = data.lstrip("\ufeff").strip()

    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise PointListParseError(f"Invalid JSON point list: {e}") from e

    if not isinstance(records, list):
        raise PointListParseError("JSON point list must be an array of points")
    return records


class PointListParser:
    """Parser for point list files (.json, .xlsx, .xls)."""

    def __init__(self, file_path: str):
        """
        Initialize the parser with a file path.

        Args:
            file_path: Path to the point list file
        """
        self.file_path = Path(file_path)
        if not self.file_path.exists():
            raise PointListParseError(f"File not found: {file_path}")
        suffix = self.file_path.suffix.lower()
        if suffix not in JSON_EXTENSIONS + EXCEL_EXTENSIONS:
            raise PointListParseError(
                f"Invalid file type: {self.file_path.suffix}. Expected .json, .xlsx or .xls"
            )

    def parse(self, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Load the point records.

        Args:
            sheet_name: Sheet to read for Excel files. If None, uses the first sheet.

        Returns:
            List of point records
        """
        if self.file_path.suffix.lower() in JSON_EXTENSIONS:
            return parse_point_records_json(self.file_path.read_bytes())
        return self._parse_excel(sheet_name)

    def _parse_excel(self, sheet_name: Optional[str]) -> List[Dict[str, Any]]:
        try:
            # Read cells as text so numeric names keep their written form (101, not 101.0)
            if sheet_name:
                df = pd.read_excel(self.file_path, sheet_name=sheet_name, dtype=str)
            else:
                df = pd.read_excel(self.file_path, dtype=str)
        except (ValueError, OSError) as e:
            raise PointListParseError(f"Failed to read point list: {e}") from e

        df = df.rename(columns={col: normalize_column_name(col) for col in df.columns})
        df = df.dropna(how="all")

        records = []
        for row in df.to_dict(orient="records"):
            records.append({
                key: (None if pd.isna(value) else (value.strip() if isinstance(value, str) else value))
                for key, value in row.items()
            })
        return records


def load_point_records(file_path: str, sheet_name: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Convenience function to load point records from a file.

    Args:
        file_path: Path to the .json, .xlsx or .xls point list
        sheet_name: Optional sheet name (Excel only)

    Returns:
        List of point records
    """
    parser = PointListParser(file_path)
    return parser.parse(sheet_name)
