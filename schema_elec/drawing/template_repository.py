"""Draw.io template repository."""

import base64
import copy
import logging
import urllib.parse
import xml.etree.ElementTree as ET
import zlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


class TemplateError(Exception):
    """Exception raised for missing or invalid template documents."""
    pass


@dataclass
class TemplateInfo:
    """Information about the template file."""
    name: str
    path: str
    size: int
    modified: datetime

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'path': self.path,
            'size': self.size,
            'modified': self.modified.isoformat(),
        }


def decode_diagram_text(diagram_text: str) -> str:
    """
    Decode a compressed draw.io page payload.

    Compressed pages store base64(raw deflate(url-encoded XML)).
    """
    text = diagram_text.strip()
    if "<mxGraphModel" in text:
        return text
    try:
        raw = base64.b64decode(text)
    except ValueError as e:
        raise TemplateError(f"Invalid compressed page payload: {e}") from e

    inflated = None
    for wbits in (-15, 15, 31):
        try:
            inflated = zlib.decompress(raw, wbits=wbits)
            break
        except zlib.error:
            continue
    if inflated is None:
        raise TemplateError("Failed to decompress page payload")

    decoded = urllib.parse.unquote(inflated.decode("utf-8"))
    if "<mxGraphModel" not in decoded:
        raise TemplateError("Decoded page payload contains no <mxGraphModel>")
    return decoded


def inflate_compressed_pages(root: ET.Element) -> int:
    """
    Replace compressed page payloads by their <mxGraphModel> element.

    Returns:
        Number of pages inflated
    """
    count = 0
    for diagram in root.iter("diagram"):
        if len(diagram) == 0 and diagram.text and diagram.text.strip():
            model = ET.fromstring(decode_diagram_text(diagram.text))
            diagram.text = None
            diagram.append(model)
            count += 1
    return count


def parse_template(data: Union[bytes, str]) -> ET.Element:
    """
    Parse a draw.io document into its <mxfile> root.

    Raises:
        TemplateError: If the data is not a draw.io document
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise TemplateError(f"Template is not valid XML: {e}") from e

    if root.tag != "mxfile":
        raise TemplateError(f"Expected <mxfile> root, got <{root.tag}>")

    inflated = inflate_compressed_pages(root)
    if inflated:
        logger.debug("Inflated %d compressed template pages", inflated)
    return root


class TemplateRepository:
    """
    Owner of the canonical template document.

    The canonical tree is parsed once and never handed out: every call to
    load_template() returns a deep copy the caller may edit freely.
    """

    def __init__(self, template_path: Union[str, Path]):
        """
        Initialize the repository.

        Args:
            template_path: Path to the .drawio template file
        """
        self.template_path = Path(template_path)
        self._canonical: Optional[ET.Element] = None

    def _canonical_root(self) -> ET.Element:
        if self._canonical is None:
            if not self.template_path.exists():
                raise TemplateError(f"Template not found: {self.template_path}")
            self._canonical = parse_template(self.template_path.read_bytes())
            logger.info(
                "Loaded template %s (%d pages)",
                self.template_path.name, len(self._canonical.findall("diagram"))
            )
        return self._canonical

    def load_template(self) -> ET.Element:
        """Get a private working copy of the template document."""
        return copy.deepcopy(self._canonical_root())

    def page_names(self) -> List[str]:
        """Names of the template pages in document order."""
        return [
            d.get("name") for d in self._canonical_root().findall("diagram")
            if d.get("name")
        ]

    def info(self) -> Optional[TemplateInfo]:
        """File information of the template, None if it does not exist."""
        if not self.template_path.exists():
            return None
        stat = self.template_path.stat()
        return TemplateInfo(
            name=self.template_path.name,
            path=str(self.template_path),
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime),
        )

    def replace(self, data: bytes) -> TemplateInfo:
        """
        Replace the template file with a new document.

        The data is validated before the file is overwritten.

        Raises:
            TemplateError: If the data is not a draw.io document
        """
        parse_template(data)
        self.template_path.parent.mkdir(parents=True, exist_ok=True)
        self.template_path.write_bytes(data)
        self._canonical = None
        logger.info("Template %s replaced (%d bytes)", self.template_path.name, len(data))
        return self.info()
