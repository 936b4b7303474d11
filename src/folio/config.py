"""Pages configuration.

PagesConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PagesConfig:
    """Engine configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = PagesConfig(pages_root="site/pages", debug=True)
    """

    # Pages
    pages_root: str | Path = "pages"
    markdown_extensions: tuple[str, ...] = (".md",)

    # Installation directory whose marker is stripped from error traces
    hooks_dir: str | Path | None = None

    # Development mode
    debug: bool = False

    # Append ?_r=<ms> to assets with no fingerprint. None follows ``debug``.
    asset_cache_bust: bool | None = None

    # Templates
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Logging
    log_level: str = "info"

    @property
    def root(self) -> Path:
        """The pages root as a resolved ``Path``."""
        return Path(self.pages_root).resolve()

    @property
    def cache_bust_assets(self) -> bool:
        """Whether un-fingerprinted asset URLs get a cache-busting query."""
        if self.asset_cache_bust is None:
            return self.debug
        return self.asset_cache_bust
