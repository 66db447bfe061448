"""Wiring of configuration, stores, classifier and pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from guardnet.activity.activity_store import ActivityStore
from guardnet.config import GuardnetConfig, load_config
from guardnet.llm.classifier import LLMClassifier
from guardnet.llm.client import LLMClient
from guardnet.moderation.errors import UninstallLockedError
from guardnet.moderation.models import utcnow
from guardnet.moderation.pipeline import Classifier, DecisionPipeline
from guardnet.moderation.schedule import uninstall_locked_until
from guardnet.sites.site_store import SiteStore


@dataclass
class Runtime:
    config: GuardnetConfig
    sites: SiteStore
    activity: ActivityStore
    pipeline: DecisionPipeline

    def locked_until(self, now: Optional[datetime] = None) -> Optional[datetime]:
        return uninstall_locked_until(self.sites.list_rules(), now or utcnow())

    def uninstall(self, now: Optional[datetime] = None) -> None:
        """Wipe sites, activity and settings unless a schedule is still running."""
        locked = self.locked_until(now)
        if locked is not None:
            raise UninstallLockedError(locked)
        self.activity.wipe()
        self.sites.wipe()
        self.config.settings_path.unlink(missing_ok=True)


def build_runtime(
    config: Optional[GuardnetConfig] = None,
    classifier: Optional[Classifier] = None,
) -> Runtime:
    config = config or load_config()
    sites = SiteStore(config.sites_dir)
    activity = ActivityStore(config.activity_dir)
    if classifier is None:
        classifier = LLMClassifier(LLMClient(model=config.model, api_key=config.api_key or None))
    pipeline = DecisionPipeline(
        rule_source=sites.list_rules,
        classifier=classifier,
        sensitivity=config.sensitivity,
        sink=activity,
    )
    return Runtime(config=config, sites=sites, activity=activity, pipeline=pipeline)
