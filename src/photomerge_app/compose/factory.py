"""Factory for compositors selected by configuration."""
from __future__ import annotations

from typing import Optional, Union

from ..config import AppConfig, MergeStrategy
from .base import Compositor
from .grid import TwoRowGridCompositor
from .horizontal import HorizontalConcatenateCompositor
from .vertical import VerticalStackCompositor


def create_compositor(strategy: Union[MergeStrategy, str], **config) -> Compositor:
    """
    Build the compositor for ``strategy``.

    Args:
        strategy: A :class:`MergeStrategy` or its value ('grid', 'vertical',
            'horizontal', 'render')
        **config: Compositor-specific keyword arguments

    Raises:
        ValueError: If the strategy is unknown
    """
    try:
        strategy = MergeStrategy(strategy) if isinstance(strategy, str) else strategy
    except ValueError as exc:
        supported = ", ".join(f"'{member.value}'" for member in MergeStrategy)
        raise ValueError(f"Unknown merge strategy: {strategy}. Supported types: {supported}") from exc

    if strategy is MergeStrategy.GRID:
        return TwoRowGridCompositor(**config)
    if strategy is MergeStrategy.VERTICAL:
        return VerticalStackCompositor(**config)
    if strategy is MergeStrategy.HORIZONTAL:
        return HorizontalConcatenateCompositor(**config)
    # Qt widgets are only imported when the snapshot strategy is requested.
    from .render import OffscreenRenderCompositor

    return OffscreenRenderCompositor(**config)


def compositor_for_config(config: AppConfig, strategy: Optional[MergeStrategy] = None) -> Compositor:
    """Build the compositor for ``strategy`` (or the configured one) with app settings."""
    strategy = strategy or config.strategy
    if strategy is MergeStrategy.RENDER:
        return create_compositor(
            strategy,
            thumbnail_size=config.thumbnail_size,
            settle_delay_ms=config.settle_delay_ms,
        )
    return create_compositor(strategy)
