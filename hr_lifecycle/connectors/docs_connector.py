"""
Google Docs Connector for the HR Lifecycle Engine.

Reads document structure and applies batch edits through the Docs v1 API.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from googleapiclient.errors import HttpError

from .base_connector import ConnectorResult, GoogleApiConnector, MockConnector

logger = logging.getLogger(__name__)


class DocsConnector(GoogleApiConnector):
    """Google Docs read and batch update."""

    API_NAME = 'docs'
    API_VERSION = 'v1'
    SCOPES = ['https://www.googleapis.com/auth/documents']

    def get_document(self, document_id: str) -> ConnectorResult:
        """Fetch the full document resource."""
        try:
            document = self._execute(
                self.service.documents().get(documentId=document_id),
                f"Get document {document_id}"
            )
            return ConnectorResult(True, f"Fetched document {document_id}", document)

        except HttpError as e:
            if e.resp.status == 404:
                return ConnectorResult(False, f"Document {document_id} not found", error=str(e))
            return self._failure(f"Failed to fetch document {document_id}", e)

    def batch_update(self, document_id: str, requests: List[Dict[str, Any]]) -> ConnectorResult:
        """Apply a list of update requests in one call."""
        if not requests:
            return ConnectorResult(True, "No updates to apply", {"replies": []})

        try:
            response = self._execute(
                self.service.documents().batchUpdate(
                    documentId=document_id,
                    body={'requests': requests}
                ),
                f"Update document {document_id}"
            )

            logger.info(f"Applied {len(requests)} update(s) to document {document_id}")
            return ConnectorResult(True, f"Applied {len(requests)} update(s)", response)

        except HttpError as e:
            return self._failure(f"Failed to update document {document_id}", e)


def _paragraph(text: str) -> Dict[str, Any]:
    return {
        "paragraph": {
            "elements": [{"textRun": {"content": text + "\n", "textStyle": {}}}],
            "paragraphStyle": {"namedStyleType": "NORMAL_TEXT"},
        }
    }


class DocsMockConnector(MockConnector):
    """
    Mock implementation of the Docs connector for testing.

    Only ``replaceAllText`` requests change the stored documents; all other
    requests are recorded. Copies made through a linked Drive mock inherit
    the content of their template.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, drive: Optional[Any] = None):
        super().__init__(config)
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.applied_requests: Dict[str, List[Dict[str, Any]]] = {}
        self.drive = drive

    def add_document(self, document_id: str, paragraphs: Optional[List[str]] = None,
                     document: Optional[Dict[str, Any]] = None) -> str:
        """Seed a document from plain paragraphs or a full resource."""
        if document is None:
            document = {"body": {"content": [_paragraph(p) for p in paragraphs or []]}}
        self.documents[document_id] = dict(document, documentId=document_id)
        return document_id

    def get_document(self, document_id: str) -> ConnectorResult:
        self._record("get_document", document_id=document_id)
        document = self.documents.get(document_id) or self._from_drive_copy(document_id)
        if document is None:
            return ConnectorResult(False, f"Document {document_id} not found", error="not_found")
        return ConnectorResult(True, f"Fetched document {document_id}", copy.deepcopy(document))

    def batch_update(self, document_id: str, requests: List[Dict[str, Any]]) -> ConnectorResult:
        self._record("batch_update", document_id=document_id, requests=requests)
        if not requests:
            return ConnectorResult(True, "No updates to apply", {"replies": []})

        document = self.documents.get(document_id) or self._from_drive_copy(document_id)
        if document is None:
            return ConnectorResult(False, f"Document {document_id} not found", error="not_found")

        for request in requests:
            if "replaceAllText" in request:
                self._replace_all_text(document, request["replaceAllText"])
        self.applied_requests.setdefault(document_id, []).extend(requests)
        return ConnectorResult(True, f"Applied {len(requests)} update(s)",
                               {"replies": [{} for _ in requests]})

    def _from_drive_copy(self, document_id: str) -> Optional[Dict[str, Any]]:
        if self.drive is None or document_id not in self.drive.files:
            return None

        meta = self.drive.files[document_id]
        source = self.documents.get(meta.get("copied_from"))
        if source is not None:
            document = copy.deepcopy(source)
        else:
            document = {"body": {"content": [_paragraph(f"Mock document {meta['name']}")]}}
        document["documentId"] = document_id
        self.documents[document_id] = document
        return document

    def _replace_all_text(self, document: Dict[str, Any], replace: Dict[str, Any]) -> None:
        needle = replace["containsText"]["text"]
        for run in _iter_text_runs(document.get("body", {}).get("content", [])):
            run["content"] = run["content"].replace(needle, replace["replaceText"])


def _iter_text_runs(content: List[Dict[str, Any]]):
    for element in content:
        if "paragraph" in element:
            for inline in element["paragraph"].get("elements", []):
                if "textRun" in inline:
                    yield inline["textRun"]
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    yield from _iter_text_runs(cell.get("content", []))
