from covbadge.core.config import LOG_FORMAT, get_schema
from covbadge.core.generator import (
    BadgeConfig,
    BadgeContent,
    BadgeGenerator,
    BadgeOptions,
    measure,
    text_width,
    trend_message,
)
from covbadge.core.grading import (
    DIFF_MAGNITUDE_POLICY,
    QUALITY_POLICY,
    STATUS_POLICY,
    Band,
    GradingPolicy,
    ThresholdConfig,
)
from covbadge.core.logos import resolve_logo
from covbadge.core.manager import PRBadgeManager
from covbadge.core.models import (
    Dimensions,
    Info,
    Metadata,
    PRBadgeConfig,
    PRBadgeRequest,
    PRBadgeResult,
)
from covbadge.core.naming import build_file_name, parse_badge_file_name
from covbadge.core.settings import Settings, load_settings
from covbadge.core.store import ArtifactStore, FilesystemStore, MemoryStore
from covbadge.core.types import BadgeStyle, BadgeType, NamingScheme, Trend

__all__ = [
    "DIFF_MAGNITUDE_POLICY",
    "LOG_FORMAT",
    "QUALITY_POLICY",
    "STATUS_POLICY",
    "ArtifactStore",
    "BadgeConfig",
    "BadgeContent",
    "BadgeGenerator",
    "BadgeOptions",
    "BadgeStyle",
    "BadgeType",
    "Band",
    "Dimensions",
    "FilesystemStore",
    "GradingPolicy",
    "Info",
    "MemoryStore",
    "Metadata",
    "NamingScheme",
    "PRBadgeConfig",
    "PRBadgeManager",
    "PRBadgeRequest",
    "PRBadgeResult",
    "Settings",
    "ThresholdConfig",
    "Trend",
    "build_file_name",
    "get_schema",
    "load_settings",
    "measure",
    "parse_badge_file_name",
    "resolve_logo",
    "text_width",
    "trend_message",
]
