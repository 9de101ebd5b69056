# gridpath/app/viewer.py
#!/usr/bin/env python3
"""
Gridpath Viewer: pick a start, hover for the end, click to commit.

- Mouse:
    [LEFT CLICK]  -> pick start / commit end / start over
    [MOVE]        -> preview end under the pointer
- Keyboard:
    [A]/[D]/[B]   -> algorithm (A* / Dijkstra / BFS)
    [G]           -> toggle diagonal moves
    [R]           -> reset selection
    [Q]/[ESC]     -> quit

Config:
- ENV: GRIDPATH_MAP, GRIDPATH_ALGORITHM, GRIDPATH_DIAGONAL, GRIDPATH_LOG_LEVEL
- CLI: --map=, --algo=, --diagonal=, --log-level=, --ascii (print and exit)
"""

import logging
import sys
from typing import List, Tuple, Optional, Dict

import pygame

from gridpath.core.config import resolve_config, resolve_log_level
from gridpath.core.log_utils import setup_logging
from gridpath.core.projection import render_ascii
from gridpath.core.session import Session, AlgorithmChanged, AllowDiagonalToggled
from gridpath.core.types import Cell, Tile, GridpathError

log = logging.getLogger("gridpath.viewer")

# ---------- Config ----------
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 64
FONT_NAME = None  # default pygame font

ALGO_LABELS = {
    "AStarFinder": "A*",
    "DijkstraFinder": "Dijkstra",
    "BreadthFirstFinder": "BFS",
}

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
BLUE        = ( 70,130,180)
RED         = (220, 50, 47)
ANTIQUE     = (250,235,215)
FLOOR_GRAY  = (200,200,200)
HOVER_A     = (255,255,255, 50)
NEON_MAG_A  = (255,0,120,60)
NEON_MINT   = (0,255,200)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


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
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """True when the event was a click on this button."""
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: Session):
        pygame.init()

        self.session = session
        self.cell_size = CELL_SIZE_DEFAULT
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        n = session.size
        grid_px = GRID_MARGIN*2 + n * self.cell_size
        win_w = grid_px + PANEL_W
        win_h = max(grid_px, 560)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Gridpath")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.clock = pygame.time.Clock()
        self._hovered: Optional[Cell] = None

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Integer cell_size that fits the window; grid on the left, panel on the right."""
        n = self.session.size
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(8, min(avail_w // n, avail_h // n)))

        plate = n * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - plate) // 2)
        self.canvas_rect = pygame.Rect(0, top_y, plate, plate)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        """Grid cell under a window position, or None."""
        ox, oy = self._grid_origin
        cs = self.cell_size
        n = self.session.size
        x = (pos[0] - ox) // cs
        y = (pos[1] - oy) // cs
        if pos[0] < ox or pos[1] < oy or x >= n or y >= n:
            return None
        return (x, y)

    def run(self):
        while True:
            self._handle_events()
            self._draw()
            self.clock.tick(60)

    # ---------- session plumbing ----------
    def _after_event(self):
        self._refresh_active_states()

    def _click(self, cell: Cell):
        self.session.click(*cell)
        self._after_event()

    def _hover(self, cell: Optional[Cell]):
        if cell == self._hovered:
            return
        self._hovered = cell
        if cell is None:
            return
        before = self.session.selection
        self.session.hover(*cell)
        if self.session.selection != before:
            self._after_event()

    def _switch_algo(self, algorithm: str):
        self.session.dispatch(AlgorithmChanged(algorithm))
        self._after_event()

    def _toggle_diagonal(self):
        self.session.dispatch(AllowDiagonalToggled())
        self._after_event()

    def _reset(self):
        self.session.reset()
        self._after_event()

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_g:
                    self._toggle_diagonal()
                elif e.key == pygame.K_a:
                    self._switch_algo("AStarFinder")
                elif e.key == pygame.K_d:
                    self._switch_algo("DijkstraFinder")
                elif e.key == pygame.K_b:
                    self._switch_algo("BreadthFirstFinder")
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(480, e.w), max(360, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                consumed = False
                for b in self._buttons:
                    consumed = b.handle_mouse(e) or consumed
                if consumed:
                    continue
                cell = self.cell_at(e.pos)
                if e.type == pygame.MOUSEMOTION:
                    self._hover(cell)
                elif e.button == 1 and cell is not None:
                    self._click(cell)

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill((24, 26, 32))
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _tile_rect(self, tile: Tile) -> pygame.Rect:
        cs = self.cell_size
        ox, oy = self._grid_origin
        return pygame.Rect(ox + tile.x*cs, oy + tile.y*cs, cs, cs)

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        tiles = self.session.tiles

        for tile in tiles:
            rect = self._tile_rect(tile)
            pygame.draw.rect(self.screen, FLOOR_GRAY if tile.walkable else BLACK, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        for (col,row) in self.session.last_search.closed:
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_MAG_A)
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

        if self._hovered is not None:
            col, row = self._hovered
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(HOVER_A)
            self.screen.blit(s, (ox + col*cs, oy + row*cs))

        path = self.session.path
        if len(path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col,row) in path]
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, 5)

        for tile in tiles:
            if tile.is_start:
                self._draw_badge(tile, BLUE, "S", filled=True)
            elif tile.is_end:
                # hollow badge while the end still follows the pointer
                self._draw_badge(tile, RED, "E", filled=self.session.path_set)
            elif tile.in_path:
                rect = self._tile_rect(tile)
                pygame.draw.circle(self.screen, ANTIQUE, rect.center, max(3, cs // 8))

    def _draw_badge(self, tile: Tile, color: Tuple[int,int,int], label: str, *, filled: bool):
        rect = self._tile_rect(tile)
        radius = max(10, self.cell_size//2 - 4)
        pygame.draw.circle(self.screen, color, rect.center, radius, 0 if filled else 3)
        txt = self.font_small.render(label, True, WHITE if filled else color)
        self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        def add(label, cb, *, togglable=False, store_as: Optional[str] = None):
            rect = pygame.Rect(x, y, w, h)
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        self._algo_buttons: Dict[str, UIButton] = {}
        for name, label in ALGO_LABELS.items():
            add(f"Algo: {label}", lambda n=name: self._switch_algo(n), togglable=True)
            self._algo_buttons[name] = self._buttons[-1]
            y += h + gap

        add("Diagonal moves", self._toggle_diagonal, togglable=True, store_as="btn_diag"); y += h + gap
        add("Reset", self._reset)

        self._refresh_active_states()

    def _refresh_active_states(self):
        for name, btn in getattr(self, "_algo_buttons", {}).items():
            btn.set_active(self.session.algorithm == name)
        if hasattr(self, "btn_diag"):
            self.btn_diag.set_active(self.session.allow_diagonal)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
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

        sel = self.session.selection
        result = self.session.last_search
        m = result.metrics
        line("Metrics", big=True, color=ACCENT_GOLD)
        line(f"State: {sel.state}")
        line(f"Algo: {ALGO_LABELS.get(sel.algorithm, sel.algorithm)}")
        line(f"Diagonal: {'on' if sel.allow_diagonal else 'off'}")
        if sel.start is not None and sel.end is not None:
            line(f"Path Len: {len(result.path) or 'no path'}")
            line(f"Explored: {m.get('closed_count', len(result.closed))}")
        else:
            line("Path Len: -")

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    setup_logging(resolve_log_level(argv), color_logs=sys.stderr.isatty())
    try:
        cfg = resolve_config(argv)
        session = Session.from_config(cfg)
    except GridpathError as ex:
        print(f"Failed to start session: {ex}")
        return 1

    if "--ascii" in argv:
        print(render_ascii(session.tiles, session.size))
        return 0

    log.info("opening viewer for %s", cfg.source)
    Viewer(session).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
