"""Derive renderer-facing metadata from raw front matter."""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..config import settings
from ..errors import FrontMatterError
from .models import DocumentMetadata

logger = logging.getLogger(__name__)

NO_METADATA_WARNING = "No metadata found."


class MetadataNormalizer:
    """
    Copy front-matter fields through and fill in derived ones.

    - ``subject`` defaults to ``classification`` when not given
    - ``generator`` is always stamped with the tool name
    """

    def __init__(self, generator: Optional[str] = None):
        self.generator = generator or settings.generator_name

    def normalize(
        self, raw: Optional[dict[str, Any]]
    ) -> tuple[DocumentMetadata, list[str]]:
        """
        Normalize a raw metadata mapping.

        Args:
            raw: Mapping loaded from front matter, or None when the document
                has no front matter

        Returns:
            Tuple of (metadata, warnings)

        Raises:
            FrontMatterError: if the mapping does not fit the metadata model
        """
        if raw is None:
            return DocumentMetadata(), [NO_METADATA_WARNING]

        data = dict(raw)
        if data.get("classification") and not data.get("subject"):
            data["subject"] = data["classification"]
        data["generator"] = self.generator

        try:
            metadata = DocumentMetadata.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            raise FrontMatterError(first.get("msg", str(e)), field, first.get("input"))

        logger.debug(f"Normalized metadata with {len(data)} field(s)")
        return metadata, []
