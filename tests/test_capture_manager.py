from __future__ import annotations

from pathlib import Path

import pytest

from photomerge_app.errors import CameraError, PersistenceError
from photomerge_app.io.gallery import Gallery
from photomerge_app.io.permissions import PermissionStatus, SystemPermissions
from photomerge_app.services.capture_manager import CaptureManager


class _FailingGallery(Gallery):
    def save_file(self, source: Path):
        raise PersistenceError("library full")


def test_capture_appends_and_copies_to_gallery(tmp_path: Path, make_images, fake_camera_factory):
    (shot,) = make_images(1)
    gallery = Gallery(tmp_path / "library")
    manager = CaptureManager(fake_camera_factory([shot]), gallery=gallery)

    image = manager.capture()

    assert image is not None
    assert image.path == shot
    assert image.size == (64, 48)
    assert manager.images == (image,)
    assert len(gallery.assets()) == 1


def test_capture_copy_can_be_disabled(tmp_path: Path, make_images, fake_camera_factory):
    (shot,) = make_images(1)
    gallery = Gallery(tmp_path / "library")
    manager = CaptureManager(fake_camera_factory([shot]), gallery=gallery, save_captures_to_gallery=False)

    manager.capture()

    assert gallery.assets() == []


def test_cancelled_capture_changes_nothing(fake_camera_factory):
    manager = CaptureManager(fake_camera_factory([None]))
    notified = []
    manager.subscribe(notified.append)

    assert manager.capture() is None
    assert manager.images == ()
    assert manager.session.version == 0
    assert notified == []


def test_camera_failure_propagates_without_state_change(broken_camera):
    manager = CaptureManager(broken_camera)
    with pytest.raises(CameraError, match="busy"):
        manager.capture()
    assert manager.images == ()


def test_unexpected_camera_exception_is_wrapped(fake_camera_factory):
    manager = CaptureManager(fake_camera_factory([RuntimeError("driver crashed")]))
    with pytest.raises(CameraError, match="driver crashed"):
        manager.capture()


def test_gallery_failure_does_not_roll_back_append(tmp_path: Path, make_images, fake_camera_factory):
    (shot,) = make_images(1)
    manager = CaptureManager(fake_camera_factory([shot]), gallery=_FailingGallery(tmp_path))

    image = manager.capture()

    assert manager.images == (image,)


def test_select_and_delete_selected(make_images, fake_camera_factory):
    shots = make_images(3)
    manager = CaptureManager(fake_camera_factory(shots))
    for _ in shots:
        manager.capture()

    selected = manager.select(1)
    removed = manager.delete_selected()

    assert removed == selected
    assert removed.path == shots[1]
    assert manager.session.selected_index is None
    assert [image.path for image in manager.images] == [shots[0], shots[2]]
    assert shots[1].exists()


def test_delete_without_selection_returns_none(make_images, fake_camera_factory):
    shots = make_images(1)
    manager = CaptureManager(fake_camera_factory(shots))
    manager.capture()
    assert manager.delete_selected() is None
    assert len(manager.images) == 1


def test_clear_selection_notifies_listeners(make_images, fake_camera_factory):
    shots = make_images(1)
    manager = CaptureManager(fake_camera_factory(shots))
    manager.capture()
    manager.select(0)
    seen = []
    manager.subscribe(seen.append)

    manager.clear_selection()

    assert seen[-1].selected_index is None


def test_request_permissions_reports_each_permission(tmp_path: Path, fake_camera_factory):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    permissions = SystemPermissions(0, blocker / "library", device_check=lambda index: True)
    manager = CaptureManager(fake_camera_factory([]), permissions=permissions)

    report = manager.request_permissions()

    assert report.camera is PermissionStatus.GRANTED
    assert report.gallery is PermissionStatus.DENIED
    assert not report.all_granted
    assert report.denied() == ["gallery"]


def test_request_permissions_all_granted(tmp_path: Path, fake_camera_factory):
    permissions = SystemPermissions(0, tmp_path / "library", device_check=lambda index: True)
    manager = CaptureManager(fake_camera_factory([]), permissions=permissions)
    assert manager.request_permissions().all_granted


def test_request_permissions_without_provider(fake_camera_factory):
    assert CaptureManager(fake_camera_factory([])).request_permissions() is None
