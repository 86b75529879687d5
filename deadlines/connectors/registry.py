"""Source factory keyed by ``DEADLINES_SOURCE``."""

from __future__ import annotations

from typing import Optional

from deadlines.settings import Settings, SourceMode, get_settings

from .base import BaseSource
from .github import GitHubSource
from .local import LocalSource
from .sample import SampleSource


def build_source(settings: Optional[Settings] = None) -> BaseSource:
    cfg = settings or get_settings()
    if cfg.source is SourceMode.LOCAL:
        # root_dir presence is enforced by Settings validation
        return LocalSource(cfg.root_dir or "", extension=cfg.file_extension)
    if cfg.source is SourceMode.SAMPLE:
        return SampleSource(extension=cfg.file_extension)
    return GitHubSource(cfg)
