from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from cookify.config import Settings
from cookify.core.models import utcnow
from cookify.services.exceptions import RepoError
from cookify.services.repo.json_repo import _locked  # reuse existing cross-platform lock

logger = logging.getLogger(__name__)


class MetricsLogger:
    """Append-only JSONL latency log for the remote store.

    One JSON object per line:
      - ts: ISO timestamp (UTC)
      - kind: "latency"
      - name: short name (e.g., "recipe_search", "ai_generate")
      - duration_ms: float
      - extra: optional context
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.path = self.settings.metrics_file

    def log_latency(
        self,
        name: str,
        duration_ms: float,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        entry: Dict[str, Any] = {
            "ts": utcnow().isoformat(),
            "kind": "latency",
            "name": name,
            "duration_ms": round(float(duration_ms), 3),
        }
        if extra:
            entry["extra"] = extra
        line = (json.dumps(entry, ensure_ascii=False, separators=(",", ":")) + "\n").encode("utf-8")
        try:
            with _locked(self.path):
                with open(self.path, "ab") as f:
                    f.write(line)
        except (OSError, RepoError) as e:
            # Metrics never fail a request
            logger.warning("Could not write metric %s: %s", name, e)
