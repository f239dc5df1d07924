# pathviz/app/viewer.py
#!/usr/bin/env python3
"""
A* Visualizer — place start/end/walls, then watch the search replay.

- Mouse (while no search is active):
    left click   -> start, then end, then toggle walls
    right click  -> remove start / end / wall
- Keyboard:
    [SPACE]/[ENTER] -> start search / pause / resume
    [N]          -> single step
    [C]          -> clear search (keep walls)
    [R]          -> reset grid
    [H]          -> toggle heuristic (manhattan / zero)
    [1]/[2]/[3]  -> load map
    [S]          -> save layout (--save=PATH, default ./custom_map.json)
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

Settings: see pathviz.app.settings (PATHVIZ_* env vars or --key=value).
"""

import logging
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pygame

from pathviz.app.editor import Editor
from pathviz.app.settings import MAX_SPEED, MIN_SPEED, Settings, resolve_settings
from pathviz.core.astar import construct_grid
from pathviz.core.errors import BrokenParentChain, InvalidEndpoints
from pathviz.core.heuristics import HEURISTICS
from pathviz.core.maps import MapSpec, load_map, save_map
from pathviz.core.replay import TraceReplay
from pathviz.core.types import Coord, Grid, StepResult

logger = logging.getLogger(__name__)

# ---------- Config ----------
MAP_DIR = Path(__file__).resolve().parents[1] / "maps"  # shipped as package data
MAP_FILES = {
    "01_open":   MAP_DIR / "01_open.json",
    "02_detour": MAP_DIR / "02_detour.json",
    "03_sealed": MAP_DIR / "03_sealed.json",
}
PANEL_W = 440            # right band: details + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 48
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
WALL_GRAY   = ( 52, 56, 64)
FLOOR       = (200,200,200)
OPEN_A      = (0,150,255,110)
CLOSED_A    = (255,0,120,90)
CURRENT_A   = (255,210,0,140)
PATH_YELLOW = (255,235, 59)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
TEXT_DIM    = (150,158,170)
ACCENT_GOLD = (255,210,0)
WARN_BG     = (120, 40, 40, 230)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        if self.active and self.togglable:
            bg = (58, 86, 160, 235)
        elif self.hover:
            bg = (46, 50, 60, 230)
        else:
            bg = (36, 40, 48, 220)
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)

        # subtle highlight top band
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


def _wrap(text: str, font: pygame.font.Font, width: int) -> List[str]:
    """Greedy word wrap for the details card."""
    lines: List[str] = []
    cur = ""
    for word in text.split(" "):
        cand = f"{cur} {word}" if cur else word
        if font.size(cand)[0] <= width or not cur:
            cur = cand
        else:
            lines.append(cur)
            cur = word
    if cur:
        lines.append(cur)
    return lines


# ---------- Viewer ----------
class Viewer:
    def __init__(self, settings: Optional[Settings] = None):
        pygame.init()
        self.settings = settings or Settings()
        self.message = ""

        self.grid = construct_grid(self.settings.size)
        self.editor = Editor(self.grid)
        self.selected_map_key = "custom"
        if self.settings.map_path is not None:
            self._load_map_path(self.settings.map_path, "custom")

        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 26)

        self.cell_size = self._auto_cell_size(self.grid)
        grid_px = GRID_MARGIN*2 + self.grid.size * self.cell_size
        win_w = grid_px + PANEL_W
        win_h = max(grid_px, 860)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("A* Visualizer")

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.heuristic = self.settings.heuristic
        self.steps_per_sec = self.settings.steps_per_sec
        self.clock = pygame.time.Clock()
        self.replay: Optional[TraceReplay] = None
        self.running = False
        self.state = "Idle"
        self._last_step_t = 0.0
        self.log_scroll = 0  # lines scrolled back from the newest step
        self._reset_overlays()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(12, min(avail_w // self.grid.size, avail_h // self.grid.size)))

        grid_plate = self.grid.size * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - (grid_plate + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate, grid_plate)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(14, min(CELL_SIZE_DEFAULT, target_h // grid.size))

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Coord]:
        ox, oy = self._grid_origin
        cs = self.cell_size
        col = (pos[0] - ox) // cs
        row = (pos[1] - oy) // cs
        if pos[0] < ox or pos[1] < oy or not self.grid.in_bounds((col, row)):
            return None
        return (col, row)

    # ---------- loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        if self.replay is None:
            if not self._start_search():
                return
        res = self.replay.step()
        self._apply(res)

    def _apply(self, res: StepResult):
        if res.status == "running":
            self.open_set = set(res.opened)
            self.closed_set = set(res.closed)
        elif res.status in ("path", "done"):
            self.open_set.clear()
            self.closed_set.clear()
        if res.current is not None:
            self.current = res.current
        if res.path is not None:
            self.path = res.path
        if res.status == "done":
            self.state = "Done"; self.running = False
        elif res.status == "no_path":
            self.state = "No path"; self.running = False
            self.message = "No path found"
        elif self.running:
            self.state = "Path" if res.status == "path" else "Running"
        else:
            self.state = "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    # ---------- actions ----------
    def _start_search(self) -> bool:
        if not self.editor.ready():
            self.message = "Please select a start and end node."
            logger.warning("Search requested without start and end")
            self.running = False
            return False
        replay = TraceReplay(heuristic_name=self.heuristic)
        try:
            replay.init(self.grid, self.editor.start, self.editor.goal)
        except InvalidEndpoints as ex:
            self.message = str(ex)
            logger.warning("Cannot search: %s", ex)
            self.running = False
            return False
        except BrokenParentChain as ex:
            logger.exception("Search failed with a broken parent chain")
            self.message = f"Internal error: {ex}"
            self.running = False
            return False
        self.replay = replay
        self.message = ""
        return True

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            return
        if self.replay is None and not self._start_search():
            self._refresh_active_states()
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(MIN_SPEED, min(MAX_SPEED, self.steps_per_sec + dv)))

    def _toggle_heuristic(self):
        names = sorted(HEURISTICS)
        self.heuristic = names[(names.index(self.heuristic) + 1) % len(names)]
        logger.info("Heuristic: %s", self.heuristic)
        if self.replay is not None:
            self._clear_search()
        self._refresh_active_states()

    def _clear_search(self):
        """Drop the current search, keep start/end/walls."""
        self.running = False
        self.state = "Idle"
        self.replay = None
        self.grid.clear_costs()
        self._reset_overlays()
        self._refresh_active_states()

    def _reset(self):
        self._clear_search()
        self.editor.reset()
        self.message = ""

    def _load_map_path(self, path: Path, key: str) -> bool:
        try:
            spec = load_map(path)
        except (OSError, ValueError) as ex:
            logger.error("Failed to load map %s: %s", path, ex)
            self.message = f"Failed to load map: {ex}"
            return False
        self.grid = spec.build_grid()
        self.editor.load(self.grid, spec.start, spec.goal)
        self.selected_map_key = key
        return True

    def _switch_map(self, key: str):
        if key not in MAP_FILES: return
        self._clear_search()
        if self._load_map_path(MAP_FILES[key], key):
            pygame.display.set_caption(f"A* Visualizer — {key}")
            self.message = ""
            self._layout(*self.screen.get_size())

    def _save_map(self):
        spec = MapSpec.from_grid(self.grid, self.editor.start, self.editor.goal)
        try:
            save_map(self.settings.save_path, spec)
            self.message = f"Saved {self.settings.save_path.name}"
        except OSError as ex:
            logger.error("Failed to save map: %s", ex)
            self.message = f"Failed to save map: {ex}"

    def _reset_overlays(self):
        self.open_set: set[Coord] = set()
        self.closed_set: set[Coord] = set()
        self.path: List[Coord] = []
        self.current: Optional[Coord] = None
        self._last_metrics: Dict = {}
        self.log_scroll = 0

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type == pygame.MOUSEWHEEL:
                self._scroll_log(e.y)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                self._handle_mouse(e)

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self._toggle_run()
        elif key == pygame.K_n:
            self.running = False
            self._do_step()
        elif key == pygame.K_c:
            self._clear_search()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_h:
            self._toggle_heuristic()
        elif key == pygame.K_s:
            self._save_map()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._bump_speed(+1)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self._bump_speed(-1)
        elif key == pygame.K_1:
            self._switch_map("01_open")
        elif key == pygame.K_2:
            self._switch_map("02_detour")
        elif key == pygame.K_3:
            self._switch_map("03_sealed")

    def _handle_mouse(self, e: pygame.event.Event):
        for b in list(self._buttons):
            if b.handle_mouse(e):
                return
        if e.type != pygame.MOUSEBUTTONDOWN or self.replay is not None:
            return
        c = self.cell_at(e.pos)
        if c is None:
            return
        if e.button == 1:
            self.editor.left_click(c)
        elif e.button == 3:
            self.editor.right_click(c)
        self.message = ""

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_details_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h-1)
            c = (
                int(top[0] + (bot[0]-top[0]) * t),
                int(top[1] + (bot[1]-top[1]) * t),
                int(top[2] + (bot[2]-top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_rect(self, c: Coord) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        return pygame.Rect(ox + c[0]*cs, oy + c[1]*cs, cs, cs)

    def _fill(self, c: Coord, rgba):
        rect = self._cell_rect(c)
        s = pygame.Surface(rect.size, pygame.SRCALPHA); s.fill(rgba)
        self.screen.blit(s, rect.topleft)

    def _draw_grid(self):
        for cell in self.grid.cells:
            rect = self._cell_rect(cell.coord)
            pygame.draw.rect(self.screen, WALL_GRAY if cell.is_wall else FLOOR, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        # overlays: closed, open, path, current
        for c in self.closed_set: self._fill(c, CLOSED_A)
        for c in self.open_set:   self._fill(c, OPEN_A)
        for c in self.path:       self._fill(c, PATH_YELLOW + (200,))
        if self.current is not None:
            self._fill(self.current, CURRENT_A)

        if len(self.path) >= 2:
            pts = [self._cell_rect(c).center for c in self.path]
            pygame.draw.lines(self.screen, BLACK, False, pts, 3)

        # cell numbers
        if self.cell_size >= 24:
            for cell in self.grid.cells:
                if cell.is_wall:
                    continue
                label = self.font_small.render(str(self.grid.number(cell.coord)), True, (60, 64, 72))
                rect = self._cell_rect(cell.coord)
                self.screen.blit(label, (rect.x + 3, rect.y + 2))

        if self.editor.start is not None:
            self._draw_badge(self.editor.start, BLUE, "S")
        if self.editor.goal is not None:
            self._draw_badge(self.editor.goal, RED, "E")

    def _draw_badge(self, c: Coord, color: Tuple[int,int,int], letter: str):
        rect = self._cell_rect(c)
        pygame.draw.circle(self.screen, color, rect.center, max(6, self.cell_size//2 - 6))
        txt = self.font.render(letter, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + details ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 330  # leaves space for the details card above
        w = max(200, rb.width - 32)
        half = (w - 8) // 2
        h = 38
        gap = 10

        def add(label, cb, col, *, togglable=False, store_as: Optional[str] = None, full=False):
            rect = pygame.Rect(x + col * (half + 8), y, w if full else half, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Start / Pause", self._toggle_run, 0, togglable=True, store_as="btn_run")
        add("Step Once", lambda: self._handle_key(pygame.K_n), 1); y += h + gap
        add("Clear Search", self._clear_search, 0)
        add("Reset Grid", self._reset, 1); y += h + gap
        add("Speed −", lambda: self._bump_speed(-1), 0)
        add("Speed +", lambda: self._bump_speed(+1), 1); y += h + gap
        add("Heuristic", self._toggle_heuristic, 0)
        add("Save Map", self._save_map, 1); y += h + gap
        add("Map 1: Open",   lambda: self._switch_map("01_open"),   0, togglable=True, store_as="btn_map1")
        add("Map 2: Detour", lambda: self._switch_map("02_detour"), 1, togglable=True, store_as="btn_map2"); y += h + gap
        add("Map 3: Sealed", lambda: self._switch_map("03_sealed"), 0, togglable=True, store_as="btn_map3")

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            running = getattr(self, "running", False)
            replay = getattr(self, "replay", None)
            self.btn_run.set_active(running)
            if running:
                self.btn_run.label = "Pause"
            elif replay is not None and not replay.finished:
                self.btn_run.label = "Resume"
            else:
                self.btn_run.label = "Start"
        key = getattr(self, "selected_map_key", "custom")
        for i, k in enumerate(MAP_FILES, start=1):
            btn = getattr(self, f"btn_map{i}", None)
            if btn is not None:
                btn.set_active(key == k)

    def details_lines(self) -> List[str]:
        """Text of the node details card."""
        m = self._last_metrics
        if "node" not in m:
            return ["Place start, end and walls,", "then press Start."]
        closed = sorted(self.grid.number(c) for c in self.closed_set)
        opened = sorted(self.grid.number(c) for c in self.open_set)
        return [
            f"Node {m['node']} Details:",
            f"g (Cost from start): {m['g']}",
            f"h (Heuristic estimate to goal): {m['h']}",
            f"f (Total cost): {m['f']}",
            f"Open Set: [{', '.join(map(str, opened))}]",
            f"Closed Set: [{', '.join(map(str, closed))}]",
        ]

    def log_lines(self) -> List[str]:
        """One line per replayed step, oldest first, path walk included."""
        if self.replay is None:
            return []
        lines = []
        for rec in self.replay.history:
            node = self.grid.number(rec.current)
            lines.append(f"Node {node}: g={rec.g} h={rec.h} f={rec.f}  "
                         f"open={len(rec.frontier)} closed={len(rec.visited)}")
        return lines

    def _scroll_log(self, dy: int):
        total = len(self.log_lines())
        self.log_scroll = max(0, min(max(0, total - 1), self.log_scroll + dy))

    def _draw_details_and_buttons(self):
        rb = self._right_band

        card_h = 310
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18
        max_w = rb.width - 48
        bottom = rb.y + 10 + card_h - 8

        def line(text, big=False, color=TEXT_LIGHT, small=False):
            nonlocal y0
            f = self.font_big if big else (self.font_small if small else self.font)
            for part in _wrap(text, f, max_w):
                if y0 + f.get_height() > bottom:
                    return
                surf = f.render(part, True, color)
                self.screen.blit(surf, (x0, y0))
                y0 += surf.get_height() + 4

        line("Heuristic Details", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"State: {self.state}   Step: {m.get('step', 0)}   Path: {m.get('path_len', 0)}")
        line(f"Mode: {self.editor.mode}   h: {self.heuristic}   Speed: {self.steps_per_sec}/s")
        line("-" * 30, color=TEXT_DIM)
        for text in self.details_lines():
            line(text, small=text.startswith(("Open", "Closed")))

        for b in self._buttons:
            b.draw(self.screen, self.font)

        self._draw_step_log()

        if self.message:
            surf = self.font.render(self.message, True, WHITE)
            pill = pygame.Rect(rb.x + 16, rb.bottom - surf.get_height() - 28,
                               min(rb.width - 32, surf.get_width() + 24), surf.get_height() + 12)
            s = pygame.Surface(pill.size, pygame.SRCALPHA)
            pygame.draw.rect(s, WARN_BG, s.get_rect(), border_radius=10)
            self.screen.blit(s, pill.topleft)
            self.screen.blit(surf, (pill.x + 12, pill.y + 6))

    def _draw_step_log(self):
        """Newest steps at the bottom; mouse wheel scrolls back."""
        rb = self._right_band
        top = max(b.rect.bottom for b in self._buttons) + 12 if self._buttons else rb.y + 10
        bottom = rb.bottom - 56  # room for the message banner
        if bottom - top < 40:
            return
        card = pygame.Surface((rb.width - 20, bottom - top), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        self.screen.blit(card, (rb.x + 10, top))

        title = self.font.render("Step Log", True, ACCENT_GOLD)
        self.screen.blit(title, (rb.x + 24, top + 8))
        line_h = self.font_small.get_height() + 2
        y0 = top + 12 + title.get_height()
        rows = max(0, (bottom - 8 - y0) // line_h)

        lines = self.log_lines()
        end = len(lines) - self.log_scroll
        for text in lines[max(0, end - rows):end]:
            surf = self.font_small.render(text, True, TEXT_LIGHT)
            self.screen.blit(surf, (rb.x + 24, y0))
            y0 += line_h


# ---------- main ----------
def main(argv: Optional[List[str]] = None):
    settings = resolve_settings(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Starting viewer: %dx%d grid, heuristic=%s", settings.size, settings.size, settings.heuristic)
    Viewer(settings).run()


if __name__ == "__main__":
    main()
