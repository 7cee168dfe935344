"""
config.py - Configuration model for seedmatch
"""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
from rich.console import Console
import sys

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from seedmatch.__version__ import __version__

console = Console()

DEFAULT_USER_AGENT = f"seedmatch/{__version__}"


class SnatchConfig(BaseModel):
    """Settings for downloading .torrent files from trackers."""

    timeout_ms: Optional[float] = Field(
        default=None,
        ge=0,
        description="Abort a snatch after this many milliseconds (unset means no timeout)"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every snatch request"
    )

    @property
    def timeout_seconds(self) -> Optional[float]:
        if self.timeout_ms is None:
            return None
        return self.timeout_ms / 1000


class FuzzyMatchConfig(BaseModel):
    """Parameters that control fuzzy name resolution against the index."""

    levenshtein_threshold: float = Field(
        default=1,
        ge=0,
        description="Absolute minimum edit-distance ceiling for accepting a fuzzy match"
    )
    advisory_window: float = Field(
        default=2,
        ge=0,
        description="Extra distance above the ceiling for which near misses are still logged"
    )


class IndexConfig(BaseModel):
    torrent_dir: Optional[Path] = None
    output_dir: Optional[Path] = None
    database: Path = Path("seedmatch.db")


class SeedmatchConfig(BaseModel):
    snatch: SnatchConfig = Field(default_factory=SnatchConfig)
    fuzzy: FuzzyMatchConfig = Field(default_factory=FuzzyMatchConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    config_path: Optional[Path] = None


def load_config(config_path: Path) -> SeedmatchConfig:
    """Load configuration from TOML file"""

    if not config_path.exists():
        console.print(f"[red][ERROR][/red] Configuration file not found: {config_path}")
        console.print("Please create config.toml with [snatch], [fuzzy] and [index] sections")
        sys.exit(1)

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)

        return SeedmatchConfig(
            snatch=SnatchConfig(**config_data.get("snatch", {})),
            fuzzy=FuzzyMatchConfig(**config_data.get("fuzzy", {})),
            index=IndexConfig(**config_data.get("index", {})),
            config_path=config_path
        )

    except Exception as e:
        console.print(f"[red][ERROR][/red] Error loading configuration: {e}")
        sys.exit(1)
