"""
Per-workflow, per-day JSONL capture of relayed conversations.

Layout: ``<root_dir>/<workflow_id>/<YYYY-MM-DD>.jsonl``, one record per line.
Before a record is appended, its prompt is compared with the prompts already
captured for the same workflow and day; near-duplicates are dropped.
"""
from __future__ import annotations

import json
import logging
import re
from datetime import date
from pathlib import Path

from prompt_relay.core.strategy import (MultiMetricStrategy,
                                        SimilarityStrategy, build_strategy)
from prompt_relay.data.conversation import ConversationRecord

logger = logging.getLogger(__name__)

_WORKFLOW_ID_RE = re.compile(r"[A-Za-z0-9_.\-]+")


def validate_workflow_id(workflow_id: str) -> str:
    """Reject workflow ids that are not safe as a single directory name."""
    if not _WORKFLOW_ID_RE.fullmatch(workflow_id or "") or workflow_id in (".", ".."):
        raise ValueError(f"Invalid workflow id: {workflow_id!r}")
    return workflow_id


class ConversationLog:
    """
    Append-only conversation capture with near-duplicate suppression.

    Example:
        log = ConversationLog("data", dedup_threshold=0.9)
        record = ConversationRecord.from_exchange(request, response, "/v1/completions", "invoices")
        written = log.append(record)  # False if an almost identical prompt was already captured today
    """

    def __init__(
        self,
        root_dir: str | Path,
        strategy: SimilarityStrategy | None = None,
        dedup: bool = True,
        dedup_threshold: float = 0.9,
        max_prompt_chars: int = 100_000,
    ):
        if not 0.0 <= dedup_threshold <= 1.0:
            raise ValueError(f"dedup_threshold must be within [0, 1], got {dedup_threshold}")
        if max_prompt_chars <= 0:
            raise ValueError(f"max_prompt_chars must be positive, got {max_prompt_chars}")

        self.root_dir = Path(root_dir)
        self.strategy = strategy or MultiMetricStrategy()
        self.dedup = dedup
        self.dedup_threshold = dedup_threshold
        self.max_prompt_chars = max_prompt_chars

    @classmethod
    def from_config(cls, cfg, root_dir: str | Path | None = None) -> ConversationLog:
        """Create a log from the ``capture`` and ``similarity`` config sections."""
        return cls(
            root_dir=root_dir if root_dir is not None else cfg.capture.root_dir,
            strategy=build_strategy(cfg),
            dedup=cfg.capture.dedup,
            dedup_threshold=cfg.capture.dedup_threshold,
            max_prompt_chars=cfg.capture.max_prompt_chars,
        )

    def path_for(self, workflow_id: str, day: date) -> Path:
        """JSONL file holding the records of ``workflow_id`` captured on ``day``."""
        return self.root_dir / validate_workflow_id(workflow_id) / f"{day.isoformat()}.jsonl"

    def read(self, workflow_id: str, day: date) -> list[ConversationRecord]:
        """Load all records of one workflow and day. Malformed lines are skipped."""
        path = self.path_for(workflow_id, day)
        if not path.exists():
            return []

        records = []
        with path.open("rb") as handle:
            for line_number, raw_line in enumerate(handle, 1):
                if not raw_line.strip():
                    continue
                try:
                    line = raw_line.decode("utf-8")
                    records.append(ConversationRecord.from_dict(json.loads(line)))
                except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, AttributeError) as error:
                    logger.warning(f"Skipping malformed record {path}:{line_number}: {error}")
        return records

    def _capped(self, prompt: str) -> str:
        return prompt[:self.max_prompt_chars]

    def find_duplicate(self, record: ConversationRecord) -> ConversationRecord | None:
        """First record of the same workflow and day whose prompt is near-identical."""
        prompt = self._capped(record.prompt)
        for previous in self.read(record.workflow_id, record.captured_at.date()):
            if self.strategy.is_duplicate(prompt, self._capped(previous.prompt), self.dedup_threshold):
                return previous
        return None

    def append(self, record: ConversationRecord, dedup: bool | None = None) -> bool:
        """
        Append ``record`` to its workflow/day file.

        Args:
            record: Record to capture
            dedup: Override the log-wide duplicate check for this call

        Returns:
            True if the record was written, False if it was dropped as a duplicate
        """
        dedup = self.dedup if dedup is None else dedup
        path = self.path_for(record.workflow_id, record.captured_at.date())

        if dedup:
            duplicate = self.find_duplicate(record)
            if duplicate is not None:
                logger.info(
                    f"Skipped near-duplicate prompt for workflow {record.workflow_id} "
                    f"(matches record from {duplicate.timestamp})"
                )
                return False

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record.to_dict(), ensure_ascii=False))
            handle.write("\n")
        logger.info(f"Saved conversation to {path} (workflow: {record.workflow_id})")
        return True
