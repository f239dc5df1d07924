import pygame
import pytest

from pathviz.app import viewer as viewer_mod
from pathviz.app.settings import Settings


@pytest.fixture
def viewer(monkeypatch, tmp_path):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    v = viewer_mod.Viewer(Settings(size=3, save_path=tmp_path / "custom.json"))
    yield v
    pygame.quit()


def _click(v, cell, button=1):
    pos = v._cell_rect(cell).center
    v._handle_mouse(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=button, pos=pos))


def test_cell_at_maps_pixels_to_cells(viewer):
    for c in [(0, 0), (1, 2), (2, 2)]:
        assert viewer.cell_at(viewer._cell_rect(c).center) == c
    assert viewer.cell_at((0, 0)) is None


def test_search_without_endpoints_shows_message(viewer):
    viewer._handle_key(pygame.K_n)
    assert viewer.message == "Please select a start and end node."
    assert viewer.replay is None


def test_place_and_step_to_done(viewer):
    _click(viewer, (0, 0))
    _click(viewer, (2, 2))
    _click(viewer, (1, 1))
    assert viewer.grid.is_wall((1, 1))

    viewer._handle_key(pygame.K_n)
    assert viewer.replay is not None
    assert viewer.state == "Paused"
    assert viewer.current == (0, 0)
    assert viewer.details_lines()[0] == "Node 0 Details:"

    # grid edits are locked while a search is shown
    _click(viewer, (1, 0))
    assert not viewer.grid.is_wall((1, 0))

    for _ in range(50):
        if viewer.state == "Done":
            break
        viewer._do_step()
        viewer._draw()
    assert viewer.state == "Done"
    assert viewer.path[0] == (0, 0) and viewer.path[-1] == (2, 2)
    assert len(viewer.path) == 5

    viewer._handle_key(pygame.K_c)
    assert viewer.replay is None and viewer.path == []
    assert viewer.grid.is_wall((1, 1))

    viewer._handle_key(pygame.K_r)
    assert viewer.editor.start is None
    assert viewer.grid.walls() == []


def test_sealed_map_reports_no_path(viewer):
    viewer._switch_map("03_sealed")
    assert viewer.selected_map_key == "03_sealed"
    assert viewer.editor.start == (2, 2)
    viewer._toggle_run()
    assert viewer.running
    for _ in range(20):
        if not viewer.running:
            break
        viewer._do_step()
    assert viewer.state == "No path"
    assert viewer.message == "No path found"


def test_heuristic_toggle_and_save(viewer, tmp_path):
    assert viewer.heuristic == "manhattan"
    viewer._handle_key(pygame.K_h)
    assert viewer.heuristic == "zero"

    _click(viewer, (0, 0))
    _click(viewer, (2, 0))
    viewer._handle_key(pygame.K_s)
    assert (tmp_path / "custom.json").exists()
    viewer._draw()


def test_map_files_ship_inside_the_package():
    for path in viewer_mod.MAP_FILES.values():
        assert path.exists()
        assert path.parent.parent.name == "pathviz"


@pytest.mark.parametrize("content", ['{"size": 4, "start": [null, 1]}', '{"size": 4, "walls": 5}', "[1, 2]", "{oops"])
def test_bad_startup_map_keeps_empty_grid(monkeypatch, tmp_path, content):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    bad = tmp_path / "bad.json"
    bad.write_text(content)
    v = viewer_mod.Viewer(Settings(size=4, map_path=bad))
    try:
        assert v.grid.size == 4
        assert v.editor.start is None
        assert v.message.startswith("Failed to load map")
        v._draw()
    finally:
        pygame.quit()


def test_failed_map_switch_clears_finished_search(viewer, monkeypatch, tmp_path):
    _click(viewer, (0, 0))
    _click(viewer, (1, 0))
    for _ in range(20):
        if viewer.state == "Done":
            break
        viewer._do_step()
    assert viewer.state == "Done"

    monkeypatch.setitem(viewer_mod.MAP_FILES, "01_open", tmp_path / "missing.json")
    viewer._switch_map("01_open")
    assert viewer.state == "Idle"
    assert viewer.replay is None and viewer.path == []
    assert viewer.message.startswith("Failed to load map")

    viewer._toggle_run()
    assert viewer.running


def test_step_log_lists_every_replayed_step(viewer):
    assert viewer.log_lines() == []
    _click(viewer, (0, 0))
    _click(viewer, (2, 2))
    for _ in range(50):
        if viewer.state == "Done":
            break
        viewer._do_step()

    lines = viewer.log_lines()
    # 9 search steps then 5 path cells on the open 3x3 grid
    assert len(lines) == 14
    assert lines[0].startswith("Node 0: g=0 h=0 f=0")
    assert lines[8].startswith("Node 8: g=4 h=0 f=4")
    assert lines[-1].startswith("Node 8:") and "open=0" in lines[-1]

    viewer._scroll_log(3)
    assert viewer.log_scroll == 3
    viewer._scroll_log(100)
    assert viewer.log_scroll == 13
    viewer._scroll_log(-100)
    assert viewer.log_scroll == 0
    viewer._draw()

    viewer._handle_key(pygame.K_c)
    assert viewer.log_lines() == []
