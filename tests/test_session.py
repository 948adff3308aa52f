from pathlib import Path

import pytest

from photomerge_app.models.session import CapturedImage, Session


def _session(*names: str) -> Session:
    session = Session()
    for name in names:
        session = session.append(CapturedImage(path=Path(name)))
    return session


def _names(session: Session) -> list[str]:
    return [image.path.name for image in session.images]


def test_append_preserves_order_and_bumps_version():
    session = _session("u1.jpg", "u2.jpg", "u3.jpg")
    assert _names(session) == ["u1.jpg", "u2.jpg", "u3.jpg"]
    assert session.version == 3
    assert session.selected_index is None


def test_commands_return_new_snapshots():
    original = _session("u1.jpg", "u2.jpg")
    selected = original.select(1)
    assert original.selected_index is None
    assert selected.selected_index == 1
    assert selected.selected.path == Path("u2.jpg")


def test_delete_selected_clears_selection_and_keeps_relative_order():
    session = _session("u1.jpg", "u2.jpg", "u3.jpg", "u4.jpg").select(1)
    after = session.delete_selected()
    assert after.selected_index is None
    assert after.selected is None
    assert _names(after) == ["u1.jpg", "u3.jpg", "u4.jpg"]


def test_delete_without_selection_is_noop():
    session = _session("u1.jpg", "u2.jpg")
    assert session.delete_selected() is session


def test_selection_follows_image_when_earlier_entry_removed():
    session = _session("u1.jpg", "u2.jpg", "u3.jpg").select(2)
    shifted = session.remove_at(0)
    assert shifted.selected_index == 1
    assert shifted.selected.path == Path("u3.jpg")
    after = shifted.delete_selected()
    assert _names(after) == ["u2.jpg"]


def test_select_then_append_then_delete_removes_selected_image():
    session = _session("u1.jpg", "u2.jpg").select(0).append(CapturedImage(path=Path("u3.jpg")))
    after = session.delete_selected()
    assert _names(after) == ["u2.jpg", "u3.jpg"]


def test_removing_selected_entry_clears_selection():
    session = _session("u1.jpg", "u2.jpg").select(1)
    assert session.remove_at(1).selected_index is None


def test_clear_selection():
    session = _session("u1.jpg").select(0).clear_selection()
    assert session.selected_index is None
    assert not session.has_selection


@pytest.mark.parametrize("index", [-1, 2, 5])
def test_select_rejects_out_of_range(index):
    session = _session("u1.jpg", "u2.jpg")
    with pytest.raises(IndexError):
        session.select(index)


def test_captured_image_size():
    image = CapturedImage(path=Path("u1.jpg"))
    assert image.size is None
    assert image.with_size(640, 480).size == (640, 480)
