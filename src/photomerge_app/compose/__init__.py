"""Layout strategies for merging a batch of captured photos."""

from .base import Compositor
from .factory import compositor_for_config, create_compositor
from .grid import TwoRowGridCompositor
from .horizontal import HorizontalConcatenateCompositor
from .vertical import VerticalStackCompositor

__all__ = [
    "Compositor",
    "HorizontalConcatenateCompositor",
    "TwoRowGridCompositor",
    "VerticalStackCompositor",
    "compositor_for_config",
    "create_compositor",
]
