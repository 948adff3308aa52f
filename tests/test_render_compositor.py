from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

pytest.importorskip("PyQt6.QtWidgets")

from photomerge_app.compose import create_compositor  # noqa: E402
from photomerge_app.compose.render import OffscreenRenderCompositor  # noqa: E402
from photomerge_app.models.session import CapturedImage, Session  # noqa: E402
from photomerge_app.ui.qt_images import numpy_to_qimage, qimage_to_numpy  # noqa: E402
from photomerge_app.ui.thumbnail_model import ThumbnailListModel  # noqa: E402


def test_render_snapshot_is_bounded_by_thumbnail_size(qapp, make_images):
    images = [CapturedImage(path=path) for path in make_images(4, width=300, height=200)]
    compositor = OffscreenRenderCompositor(thumbnail_size=50, settle_delay_ms=5)

    merged = compositor.compose(images)

    assert merged.strategy == "render"
    assert compositor.requires_gui_thread
    assert len(merged.placements) == 4
    assert all(p.width == 50 and p.height == 50 for p in merged.placements)
    xs = [p.x for p in merged.placements]
    assert xs == sorted(xs)
    assert merged.height >= 50
    assert merged.width >= 4 * 50


def test_factory_builds_render_compositor(qapp):
    compositor = create_compositor("render", thumbnail_size=64, settle_delay_ms=0)
    assert isinstance(compositor, OffscreenRenderCompositor)
    assert compositor.thumbnail_size == 64


def test_qimage_round_trip_keeps_channels(qapp):
    image = np.zeros((5, 7, 3), dtype=np.uint8)
    image[..., 0] = 200
    image[..., 2] = 30
    restored = qimage_to_numpy(numpy_to_qimage(image))
    assert restored.shape == (5, 7, 3)
    assert np.array_equal(restored, image)


def test_thumbnail_model_tracks_session(qapp, make_images):
    paths = make_images(2)
    session = Session()
    for path in paths:
        session = session.append(CapturedImage(path=path))
    model = ThumbnailListModel(thumbnail_size=32)

    model.set_session(session)
    assert model.rowCount() == 2
    assert model.image_at(1).path == paths[1]

    model.set_session(session.select(0).delete_selected())
    assert model.rowCount() == 1
    assert model.image_at(0).path == paths[1]
    assert model.image_at(5) is None
