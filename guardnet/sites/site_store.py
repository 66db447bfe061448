"""File-based JSON storage for the block list.

Provides the rule operations the decision pipeline reads from: adding sites,
bulk import, and setting or clearing block schedules.  Rules live in
``~/.guardnet/sites/sites.json``.
"""

from __future__ import annotations

import json
import logging
import re
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from guardnet.moderation.models import BlockRule
from guardnet.moderation.schedule import validate_window

logger = logging.getLogger(__name__)

DEFAULT_BLOCKED_SITES: list[dict] = [
    {"id": "1", "url": "adult-example.com", "category": "Adult Content"},
    {"id": "2", "url": "gambling-demo-site.net", "category": "Gambling"},
    {"id": "3", "url": "explicit-content.org", "category": "Adult Content"},
    {"id": "4", "url": "violence-hub-demo.com", "category": "Violence"},
    {"id": "5", "url": "restricted-zone.net", "category": "Restricted"},
]

_SPLIT_RE = re.compile(r"[\n,\r;]+")
_PROTOCOL_RE = re.compile(r"^https?://")


def parse_blocklist(text: str) -> list[str]:
    """Split an imported blob into cleaned site entries.

    Tokens are separated by newlines, commas, carriage returns or
    semicolons.  Tokens of three characters or fewer are dropped; the rest
    lose a leading ``http(s)://`` and a trailing slash.
    """
    sites = []
    for token in _SPLIT_RE.split(text):
        token = token.strip()
        if len(token) <= 3:
            continue
        token = _PROTOCOL_RE.sub("", token)
        if token.endswith("/"):
            token = token[:-1]
        if token:
            sites.append(token)
    return sites


class SiteStore:
    """File-based storage for block rules.

    Storage path: ``~/.guardnet/sites/`` with:
    - ``sites.json`` -- list of rule dicts, newest first

    A missing file is seeded with :data:`DEFAULT_BLOCKED_SITES`.
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        if base_dir is None:
            self._base = Path.home() / ".guardnet" / "sites"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._sites_path = self._base / "sites.json"
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self) -> list[dict]:
        if not self._sites_path.exists():
            return [dict(site) for site in DEFAULT_BLOCKED_SITES]
        try:
            data = json.loads(self._sites_path.read_text())
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("block list %s is unreadable, treating it as empty: %s", self._sites_path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("block list %s is not a JSON list, treating it as empty", self._sites_path)
            return []
        return data

    def _write_json(self, data: list[dict]) -> None:
        self._sites_path.write_text(json.dumps(data, indent=2))

    def _load(self) -> list[BlockRule]:
        rules = []
        for item in self._read_json():
            try:
                rules.append(BlockRule.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return rules

    def _save(self, rules: list[BlockRule]) -> None:
        self._write_json([r.to_dict() for r in rules])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_rules(self) -> list[BlockRule]:
        """Return a snapshot of all rules in match order."""
        with self._lock:
            return self._load()

    def get_rule(self, rule_id: str) -> Optional[BlockRule]:
        """Look up a rule by ID. Returns None if not found."""
        for rule in self.list_rules():
            if rule.id == rule_id:
                return rule
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _add_locked(self, rules: list[BlockRule], url: str, category: str) -> Optional[BlockRule]:
        # An empty pattern would match every submission.
        if not url:
            return None
        lowered = url.lower()
        if any(r.url_pattern.lower() == lowered for r in rules):
            return None
        rule = BlockRule(id=str(uuid.uuid4()), url_pattern=url, category=category)
        rules.insert(0, rule)
        return rule

    def add_site(self, url: str, category: str = "Custom Block") -> Optional[BlockRule]:
        """Block *url* permanently.

        Returns the new rule, or None when the URL is already listed
        (compared case-insensitively).
        """
        url = url.strip()
        with self._lock:
            rules = self._load()
            rule = self._add_locked(rules, url, category)
            if rule is not None:
                self._save(rules)
        return rule

    def import_blocklist(self, text: str) -> list[BlockRule]:
        """Add every site in an imported blob. Returns the rules actually added."""
        added: list[BlockRule] = []
        with self._lock:
            rules = self._load()
            for url in parse_blocklist(text):
                rule = self._add_locked(rules, url, "Custom Block")
                if rule is not None:
                    added.append(rule)
            if added:
                self._save(rules)
        logger.info("imported %d site(s) into the block list", len(added))
        return added

    def update_schedule(
        self,
        rule_id: str,
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> Optional[BlockRule]:
        """Replace both window bounds of a rule, or clear them with ``None``.

        Raises :class:`InvalidScheduleError` for a malformed window, leaving
        the rule unchanged.  Returns the updated rule, or None if not found.
        """
        start, end = validate_window(start, end)
        with self._lock:
            rules = self._load()
            for rule in rules:
                if rule.id == rule_id:
                    rule.window_start, rule.window_end = start, end
                    self._save(rules)
                    return rule
        return None

    def clear_schedule(self, rule_id: str) -> Optional[BlockRule]:
        """Make a rule permanent again."""
        return self.update_schedule(rule_id, None, None)

    def wipe(self) -> None:
        """Delete the stored list; the next read starts from the defaults."""
        with self._lock:
            self._sites_path.unlink(missing_ok=True)
