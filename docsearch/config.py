"""Configuration for the docs search controllers and tool server."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_CONTENT_PATH = Path(__file__).parent / "data" / "content.json"


@dataclass
class OverlayConfig:
    """Configuration for the search overlay."""
    # Query handling
    debounce_ms: int = 150
    max_results: int = 10
    
    # Keyboard and mouse interplay
    hover_suppress_ms: int = 500  # Ignore hover this long after arrow keys
    close_animation_ms: int = 200
    shortcut_key: str = "k"  # Used with Cmd/Ctrl
    
    # Auto-scroll of the selected result
    scroll_buffer_px: float = 70.0
    scroll_lookback: int = 1
    scroll_margin_px: float = 10.0
    
    @classmethod
    def from_env(cls) -> "OverlayConfig":
        """Create config from environment variables."""
        return cls(
            debounce_ms=int(os.environ.get("DOCSEARCH_DEBOUNCE_MS", "150")),
            max_results=int(os.environ.get("DOCSEARCH_MAX_RESULTS", "10")),
            hover_suppress_ms=int(os.environ.get("DOCSEARCH_HOVER_SUPPRESS_MS", "500")),
            close_animation_ms=int(os.environ.get("DOCSEARCH_CLOSE_ANIMATION_MS", "200")),
            shortcut_key=os.environ.get("DOCSEARCH_SHORTCUT_KEY", "k"),
        )


@dataclass
class SidebarConfig:
    """Configuration for the filterable navigation sidebar."""
    scroll_buffer_px: float = 80.0  # Roughly two links
    scroll_lookback: int = 2
    scroll_margin_px: float = 20.0
    focus_key: str = "/"


@dataclass
class Config:
    """Main configuration for docs search."""
    overlay: OverlayConfig = field(default_factory=OverlayConfig.from_env)
    sidebar: SidebarConfig = field(default_factory=SidebarConfig)
    content_path: Optional[Path] = None  # None = bundled content
    
    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        content_path_str = os.environ.get("DOCSEARCH_CONTENT")
        content_path = Path(content_path_str) if content_path_str else None
        
        return cls(
            overlay=OverlayConfig.from_env(),
            sidebar=SidebarConfig(),
            content_path=content_path,
        )
    
    def resolved_content_path(self) -> Path:
        """Return the content file to load, falling back to the bundled one."""
        return self.content_path or DEFAULT_CONTENT_PATH


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.
    
    Returns:
        Config loaded from environment
    """
    global _config
    
    if _config is None:
        _config = Config.from_env()
    
    return _config
