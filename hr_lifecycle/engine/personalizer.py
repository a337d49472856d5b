"""
Template personalization.

Copies a Google Docs template and fills in its placeholders.
"""

import logging
from typing import Any, Mapping, Optional

from ..connectors.base_connector import ConnectorResult
from ..models import PlaceholderValue
from .placeholders import build_link_replacements, build_text_replacements, split_values

logger = logging.getLogger(__name__)


class DocumentPersonalizer:
    """Copies templates and substitutes placeholders through Drive and Docs."""

    def __init__(self, drive: Any, docs: Any):
        self.drive = drive
        self.docs = docs

    def apply_placeholders(self, document_id: str,
                           values: Mapping[str, PlaceholderValue]) -> ConnectorResult:
        """
        Replace placeholders in an existing document.

        Args:
            document_id: Document to edit
            values: Placeholder to text or link value

        Returns:
            ConnectorResult of the last update
        """
        _, links = split_values(values)

        result = self.docs.batch_update(document_id, build_text_replacements(values))
        if not result:
            return result

        if not links:
            return ConnectorResult(True, f"Replaced placeholders in {document_id}")

        fetched = self.docs.get_document(document_id)
        if not fetched:
            return fetched

        requests = build_link_replacements(fetched.data, links)
        if not requests:
            logger.warning(f"No link placeholders found in {document_id}: {', '.join(links)}")

        result = self.docs.batch_update(document_id, requests)
        if not result:
            return result
        return ConnectorResult(True, f"Replaced placeholders in {document_id}")

    def copy_and_personalize(self, template_id: str, destination_folder_id: Optional[str],
                             new_name: str, values: Mapping[str, PlaceholderValue]) -> ConnectorResult:
        """
        Copy a template into a folder and personalize the copy.

        The copy is trashed again when personalization fails.

        Returns:
            ConnectorResult with ``{"id", "url"}`` of the new document
        """
        copied = self.drive.copy_file(template_id, new_name, destination_folder_id)
        if not copied:
            return copied

        document_id = copied.data["id"]
        applied = self.apply_placeholders(document_id, values)
        if not applied:
            self.cleanup(document_id, f"Personalize {new_name}")
            return ConnectorResult(False, f"Failed to personalize {new_name}: {applied.message}",
                                   error=applied.error)

        logger.info(f"Created personalized document '{new_name}' ({document_id})")
        return ConnectorResult(True, f"Created {new_name}", copied.data)

    def cleanup(self, file_id: str, context: str = "File cleanup") -> None:
        """Trash a temporary file; failures are only logged."""
        if not file_id:
            return

        result = self.drive.trash_file(file_id)
        if result:
            logger.info(f"{context}: cleaned up file {file_id}")
        else:
            logger.warning(f"{context}: failed to clean up file {file_id}: {result.error}")
