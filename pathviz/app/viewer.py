# pathviz/app/viewer.py
#!/usr/bin/env python3
"""
Grid Pathfinding Viewer — paint obstacles, place endpoints, watch A* run

- Mouse:
    [LEFT]  drag  -> paint obstacles
    [RIGHT] drag  -> erase obstacles
- Keyboard:
    [S]/[E]      -> random start / end
    [G]          -> random obstacles
    [R]          -> reset grid
    [SPACE]      -> run/pause
    [N]          -> single step
    [C]          -> cancel search
    [UP]/[DOWN]  -> faster / slower (ms between steps)
    [Q]/[ESC]    -> quit

Settings: see pathviz.app.config (ENV PATHVIZ_* or --rows=.. --delay=..).
"""

import logging
import sys
from typing import List, Optional, Tuple

import pygame

from pathviz.app.config import Settings, resolve_settings
from pathviz.core.astar import AStarSearch
from pathviz.core.pacing import Pacer
from pathviz.core.types import (
    Cell, Grid, NoPathExists, PathCell, PathFound, SearchError, Visited,
)

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 320            # right band: status + metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 25
FONT_NAME = None  # default pygame font

# Colors
WHITE       = (255,255,255)
EMPTY_GRAY  = (222,226,230)
BORDER_GRAY = (160,166,172)
OBSTACLE    = ( 52, 58, 64)
START_GREEN = ( 46,139, 87)
END_RED     = (220, 50, 47)
VISITED_A   = (70,130,180,140)
PATH_GOLD   = (255,210,  0)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)
WARN_RED    = (255,120,110)

# status texts
IDLE      = "Idle"
RUNNING   = "Running"
PAUSED    = "Paused"
DONE      = "Path found!"
NO_PATH   = "No path found!"
CANCELLED = "Cancelled"


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False

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
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, (120, 170, 255, 255), self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """True when the click landed on this button."""
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, settings: Optional[Settings] = None):
        pygame.init()

        self.grid = grid
        self.settings = settings or Settings(rows=grid.rows, cols=grid.cols)
        self.cell_size = CELL_SIZE_DEFAULT
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + grid.cols * self.cell_size
        grid_px_h = GRID_MARGIN*2 + grid.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 560)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Pathfinding — A* Visualizer")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.visited: set = set()
        self.path_cells: set = set()
        self.path: List[Cell] = []

        self.search = AStarSearch()
        self.pacer = Pacer(self.settings.delay_ms)
        self.running = False
        self.state = IDLE
        self.message = ""
        self.clock = pygame.time.Clock()
        self._paint: Optional[int] = None   # mouse button held over the grid
        self._refresh_active_states()

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Integer cell size that fits the window, grid on the left, panel on the right."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // self.grid.cols, avail_h // self.grid.rows)))

        grid_plate_w = self.grid.cols * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.rows * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def cell_from_pos(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        c = (row, col)
        return c if self.grid.in_bounds(c) else None

    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    # ---------- search driving ----------
    def _tick_algorithm(self):
        if self.pacer.due(pygame.time.get_ticks() / 1000.0):
            self._do_step()

    def _begin_search(self) -> bool:
        self._clear_overlays()
        try:
            self.search.init(self.grid)
        except SearchError as ex:
            logger.info("search not started: %s", ex)
            self.message = str(ex)
            self.state = IDLE
            return False
        self.message = ""
        self.pacer.restart()
        return True

    def _do_step(self):
        if not self.search.active and not self._begin_search():
            self.running = False
            return
        ev = self.search.step()
        if isinstance(ev, Visited):
            self.visited.add(ev.cell)
        elif isinstance(ev, PathCell):
            self.path_cells.add(ev.cell)
        elif isinstance(ev, PathFound):
            self.path = list(ev.path)
            self.state = DONE; self.running = False
        elif isinstance(ev, NoPathExists):
            self.state = NO_PATH; self.running = False
        if ev is not None and self.state not in (DONE, NO_PATH):
            self.state = RUNNING if self.running else PAUSED
        self._refresh_active_states()

    def _toggle_run(self):
        if self.running:
            self.running = False
            self.state = PAUSED
        elif self.search.active or self._begin_search():
            self.running = True
            self.state = RUNNING
        self._refresh_active_states()

    def _cancel(self):
        if self.search.cancel():
            self.running = False
            self.state = CANCELLED
            self._refresh_active_states()

    # ---------- grid editing (locked while a search is in flight) ----------
    def _editable(self) -> bool:
        if self.search.active:
            self.message = "Cancel the search to edit the grid"
            return False
        if self.visited or self.path_cells:
            self._clear_overlays()
            self.state = IDLE
        self.message = ""
        return True

    def _paint_at(self, pos, button: int):
        c = self.cell_from_pos(pos)
        if c is None or not self._editable():
            return
        if button == 1:
            self.grid.add_obstacle(c)
        elif button == 3:
            self.grid.remove_obstacle(c)

    def _place(self, which: str):
        if not self._editable():
            return
        try:
            cell = self.grid.set_start() if which == "start" else self.grid.set_end()
            logger.debug("%s placed at %s", which, cell)
        except ValueError as ex:
            self.message = str(ex)

    def _randomize(self):
        if self._editable():
            self.grid.randomize_obstacles(self.settings.obstacle_density)

    def _reset(self):
        self.search.cancel()
        self.running = False
        self.state = IDLE
        self.message = ""
        self.grid.reset()
        self._clear_overlays()
        self._refresh_active_states()

    def _clear_overlays(self):
        self.visited.clear()
        self.path_cells.clear()
        self.path = []

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_SPACE:
                    self._toggle_run()
                elif e.key == pygame.K_n:
                    self.running = False
                    self._do_step()
                elif e.key == pygame.K_c:
                    self._cancel()
                elif e.key == pygame.K_s:
                    self._place("start")
                elif e.key == pygame.K_e:
                    self._place("end")
                elif e.key == pygame.K_g:
                    self._randomize()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_UP:
                    self.pacer.faster()
                elif e.key == pygame.K_DOWN:
                    self.pacer.slower()
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type == pygame.MOUSEBUTTONDOWN:
                if any(b.handle_mouse(e) for b in self._buttons):
                    continue
                if e.button in (1, 3) and self.canvas_rect.collidepoint(e.pos):
                    self._paint = e.button
                    self._paint_at(e.pos, e.button)
            elif e.type == pygame.MOUSEBUTTONUP:
                self._paint = None
            elif e.type == pygame.MOUSEMOTION:
                for b in self._buttons:
                    b.handle_mouse(e)
                if self._paint is not None:
                    self._paint_at(e.pos, self._paint)

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill((24, 26, 32))
        self._draw_grid()
        self._draw_panel()
        pygame.display.flip()

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        shade = pygame.Surface((cs, cs), pygame.SRCALPHA); shade.fill(VISITED_A)

        for row in range(self.grid.rows):
            for col in range(self.grid.cols):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                color = OBSTACLE if self.grid.cells[row][col] else EMPTY_GRAY
                pygame.draw.rect(self.screen, color, rect)
                if (row, col) in self.visited:
                    self.screen.blit(shade, rect.topleft)
                if (row, col) in self.path_cells:
                    pygame.draw.rect(self.screen, PATH_GOLD, rect)
                pygame.draw.rect(self.screen, BORDER_GRAY, rect, 1)

        self._draw_badge(self.grid.start, START_GREEN, "S")
        self._draw_badge(self.grid.end,   END_RED,     "E")

    def _draw_badge(self, cell: Optional[Cell], color: Tuple[int,int,int], label: str):
        if cell is None:
            return
        cs = self.cell_size
        ox, oy = self._grid_origin
        row, col = cell
        rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
        pygame.draw.rect(self.screen, color, rect)
        txt = self.font_small.render(label, True, WHITE)
        self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + status ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for the status card above
        w = max(160, rb.width - 32)
        h = 36
        gap = 8

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, pygame.Rect(x, y, w, h), cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", self._do_step);     y += h + gap
        add("Cancel", self._cancel);         y += h + gap

        half = (w - 8) // 2
        self._buttons.append(UIButton("Faster", pygame.Rect(x, y, half, h), self.pacer_faster))
        self._buttons.append(UIButton("Slower", pygame.Rect(x + half + 8, y, half, h), self.pacer_slower))
        y += h + gap

        self._buttons.append(UIButton("Random S", pygame.Rect(x, y, half, h), lambda: self._place("start")))
        self._buttons.append(UIButton("Random E", pygame.Rect(x + half + 8, y, half, h), lambda: self._place("end")))
        y += h + gap

        add("Random Obstacles", self._randomize); y += h + gap
        add("Reset Grid", self._reset)
        self._refresh_active_states()

    # pacer may not exist yet during the first layout
    def pacer_faster(self):
        self.pacer.faster()

    def pacer_slower(self):
        self.pacer.slower()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))

    def _draw_panel(self):
        rb = self._right_band

        card = pygame.Surface((rb.width - 20, 230), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line(self.state, big=True, color=ACCENT_GOLD)
        m = self.search.metrics()
        line(f"Visited: {m['closed_count']}")
        line(f"Open: {m['open_size']}")
        line(f"Path Len: {m['path_len']}")
        line("-" * 26)
        line(f"Grid: {self.grid.rows} x {self.grid.cols}")
        line(f"Delay: {self.pacer.delay_ms} ms")
        if self.message:
            line(self.message, color=WARN_RED)

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv=None):
    settings = resolve_settings(argv)
    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    grid = Grid(settings.rows, settings.cols)
    logger.info("starting viewer on a %dx%d grid", grid.rows, grid.cols)
    Viewer(grid, settings).run()

if __name__ == "__main__":
    main()
