from .config import (
    DecodeConfig,
    FormatConfig,
    RenderConfig,
    ViewerConfig,
    load_viewer_config,
)

__all__ = [
    "DecodeConfig",
    "FormatConfig",
    "RenderConfig",
    "ViewerConfig",
    "load_viewer_config",
]
