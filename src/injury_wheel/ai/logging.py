"""AI generation log for the injury wheel.

Saves every generated injury report to a structured log directory with
metadata. Only used when a log directory is configured.
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class AILogger:
    """Writes text generations to disk.

    Layout:
    <log_dir>/
    └── YYYY-MM-DD/
        └── text/
            ├── injury_report_HHMMSS_uuid.json
            └── ...
    """

    def __init__(self, log_dir: Union[str, Path]):
        self.log_dir = Path(log_dir)
        logger.info(f"AILogger writing to {self.log_dir}")

    def _get_text_dir(self) -> Path:
        """Get today's text log directory."""
        today = datetime.now().strftime("%Y-%m-%d")
        text_dir = self.log_dir / today / "text"
        text_dir.mkdir(parents=True, exist_ok=True)
        return text_dir

    def _generate_id(self) -> str:
        """Generate unique ID for log entries."""
        return f"{datetime.now().strftime('%H%M%S')}_{uuid.uuid4().hex[:8]}"

    def log_text_generation(
        self,
        category: str,
        prompt: str,
        response: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Log a text generation result.

        Args:
            category: Type of generation (e.g. injury_report)
            prompt: The prompt sent to AI
            response: AI's response text
            model: Model used for generation
            metadata: Additional context data

        Returns:
            Log entry ID, or "" if the entry could not be written
        """
        try:
            entry_id = self._generate_id()

            log_entry = {
                "id": entry_id,
                "timestamp": datetime.now().isoformat(),
                "category": category,
                "model": model,
                "prompt": prompt,
                "response": response,
                "metadata": metadata or {},
            }

            filepath = self._get_text_dir() / f"{category}_{entry_id}.json"
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(log_entry, f, ensure_ascii=False, indent=2)

            logger.debug(f"Logged text generation: {filepath}")
            return entry_id

        except Exception as e:
            logger.error(f"Failed to log text generation: {e}")
            return ""
