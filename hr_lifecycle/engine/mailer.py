"""
Email composition from Google Docs templates.

A template is copied, personalized, converted to HTML and turned into a
Gmail draft or a sent message. The temporary copy is always trashed.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..connectors.base_connector import ConnectorResult
from ..models import PlaceholderValue
from ..rendering import ConverterOptions, document_to_html
from .personalizer import DocumentPersonalizer

logger = logging.getLogger(__name__)


class EmailComposer:
    """
    Builds emails whose body is a personalized Google Doc.

    Args:
        drive: Drive connector used for the temporary copy
        docs: Docs connector used for substitution and reading
        gmail: Gmail connector used for drafts and sending
        converter_options: Options for the HTML converter
    """

    def __init__(self, drive: Any, docs: Any, gmail: Any,
                 converter_options: Optional[ConverterOptions] = None):
        self.gmail = gmail
        self.docs = docs
        self.personalizer = DocumentPersonalizer(drive, docs)
        self.converter_options = converter_options or ConverterOptions()

    def render_template(self, template_id: str, values: Mapping[str, PlaceholderValue],
                        temp_copy_name: str = "Temp Email Copy") -> ConnectorResult:
        """
        Render a personalized template to HTML without sending anything.

        Returns:
            ConnectorResult with the HTML string as data
        """
        copy_name = f"{temp_copy_name} {datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S')}"
        personalized = self.personalizer.copy_and_personalize(template_id, None, copy_name, values)
        if not personalized:
            return personalized

        copy_id = personalized.data["id"]
        try:
            fetched = self.docs.get_document(copy_id)
            if not fetched:
                return fetched

            html = document_to_html(fetched.data, self.converter_options, logger)
            if not html.strip():
                logger.warning(f"Template {template_id} produced an empty email body")
            return ConnectorResult(True, f"Rendered template {template_id}", html)
        finally:
            self.personalizer.cleanup(copy_id, f"Email from template {template_id}")

    def create_email_from_template(self, template_id: str, recipient: str, subject: str,
                                   values: Mapping[str, PlaceholderValue], is_draft: bool = True,
                                   temp_copy_name: str = "Temp Email Copy") -> ConnectorResult:
        """
        Create a draft or send an email based on a Google Doc template.

        Args:
            template_id: Template document ID
            recipient: Recipient address
            subject: Subject line
            values: Placeholder to text or link value
            is_draft: Create a draft instead of sending
            temp_copy_name: Name prefix of the temporary copy

        Returns:
            ConnectorResult from Gmail, or the first failure
        """
        if not recipient:
            return ConnectorResult(False, f"No recipient for \"{subject}\"", error="missing_recipient")

        rendered = self.render_template(template_id, values, temp_copy_name)
        if not rendered:
            logger.error(f"Failed to {'create draft' if is_draft else 'send email'} "
                         f"\"{subject}\" for {recipient}: {rendered.message}")
            return rendered

        if is_draft:
            result = self.gmail.create_draft(recipient, subject, rendered.data, "")
        else:
            result = self.gmail.send_message(recipient, subject, rendered.data, "")

        if result:
            logger.info(f"{'Created draft' if is_draft else 'Sent email'} \"{subject}\" "
                        f"for {recipient} using template {template_id}")
        return result
