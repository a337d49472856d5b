"""
Audit Logging Module.

Every action a workflow takes against Drive, Docs, Sheets, Gmail or the
Directory is appended to a daily JSON Lines file.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from ..models import AuditRecord

logger = logging.getLogger(__name__)


class AuditLogger:
    """
    Append-only audit log on the local file system.

    Args:
        audit_dir: Directory holding the ``audit_YYYY-MM-DD.jsonl`` files
    """

    def __init__(self, audit_dir: Union[str, Path] = "audit"):
        self.audit_dir = Path(audit_dir)
        self.audit_dir.mkdir(parents=True, exist_ok=True)

    def log_event(self, record: AuditRecord) -> str:
        """
        Append an audit record to today's file.

        Returns:
            The record ID
        """
        date_str = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        log_file = self.audit_dir / f"audit_{date_str}.jsonl"

        try:
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(record.model_dump(mode="json")) + "\n")
        except OSError as e:
            logger.error(f"Failed to log audit event: {e}")
            raise

        logger.debug(f"Logged audit event {record.id} for {record.employee}")
        return record.id

    def get_events(
        self,
        workflow_id: Optional[str] = None,
        employee: Optional[str] = None,
        limit: int = 100,
    ) -> List[AuditRecord]:
        """
        Retrieve audit events, most recent first.

        Args:
            workflow_id: Only events of this workflow run
            employee: Only events concerning this employee
            limit: Maximum number of records to return

        Returns:
            List of matching AuditRecords
        """
        results: List[AuditRecord] = []

        for log_file in sorted(self.audit_dir.glob("audit_*.jsonl"), reverse=True):
            if len(results) >= limit:
                break

            try:
                with open(log_file, encoding="utf-8") as f:
                    lines = f.readlines()
            except OSError as e:
                logger.error(f"Failed to read log file {log_file}: {e}")
                continue

            for line in reversed(lines):
                if len(results) >= limit:
                    break
                if not line.strip():
                    continue

                try:
                    record = AuditRecord(**json.loads(line))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning(f"Failed to parse audit record in {log_file.name}: {e}")
                    continue

                if workflow_id and record.workflow_id != workflow_id:
                    continue
                if employee and record.employee != employee:
                    continue

                results.append(record)

        return results

    def summarize(self, workflow_id: str) -> Dict[str, Any]:
        """Success and failure counts for one workflow run."""
        events = self.get_events(workflow_id=workflow_id, limit=10000)
        successful = len([e for e in events if e.success])
        return {
            "workflow_id": workflow_id,
            "total_events": len(events),
            "successful": successful,
            "failed": len(events) - successful,
            "systems": sorted({e.system for e in events}),
        }
