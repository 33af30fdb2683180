import numpy as np
import pygame

from tile_maze.core.grid import CellState, TileGrid

# Indexed by CellState value
PALETTE = np.array([
    (200, 200, 200),  # WALL
    (10, 10, 10),     # FLOOR
    (60, 180, 75),    # START
    (230, 60, 60),    # EXIT
    (60, 100, 160),   # UNCARVED
], dtype=np.uint8)

COLOR_HEAD = (255, 215, 0)  # Gold


def grid_to_rgb(grid: TileGrid) -> np.ndarray:
    """
    Maps every cell to its tile color. Returns a (width, height, 3) array,
    the axis order pygame.surfarray expects.
    """
    states = grid.to_numpy()
    return np.transpose(PALETTE[states], (1, 0, 2))


class Renderer:
    """
    Draws a grid one tile per cell. With a replay adapter attached, advances
    the replay by one step every `delay` seconds (or all at once when
    `instant` is set) so the carve can be watched.
    """
    def __init__(self, grid: TileGrid, replay=None, delay: float = 0.05, instant: bool = False,
                 width=1280, height=720):
        self.grid = grid
        self.replay = replay
        self.delay = max(0.0, delay)
        self.instant = instant
        self.screen_width = width
        self.screen_height = height

        self.cell_size = 20.0
        self.offset_x = 0.0
        self.offset_y = 0.0

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.finished = replay is None

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        zoom_x = (self.screen_width - padding * 2) / self.grid.width
        zoom_y = (self.screen_height - padding * 2) / self.grid.height
        self.cell_size = max(1.0, min(zoom_x, zoom_y))

        self.offset_x = (self.screen_width - self.grid.width * self.cell_size) / 2
        self.offset_y = (self.screen_height - self.grid.height * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Tile Maze - {self.grid.width}x{self.grid.height}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to_screen()

    def draw_grid(self):
        self.surface.fill((0, 0, 0))
        tiles = pygame.surfarray.make_surface(grid_to_rgb(self.grid))
        size = (int(self.grid.width * self.cell_size), int(self.grid.height * self.cell_size))
        self.surface.blit(pygame.transform.scale(tiles, size), (self.offset_x, self.offset_y))

        head = getattr(self.replay, "head", None)
        if head is not None:
            px = int(head.x * self.cell_size + self.offset_x)
            py = int(head.y * self.cell_size + self.offset_y)
            s = int(self.cell_size) + 1
            pygame.draw.rect(self.surface, COLOR_HEAD, (px, py, s, s))

    def draw_hud(self):
        status = "Done" if self.finished else "Carving"
        info = [f"Size: {self.grid.width}x{self.grid.height}", f"Status: {status}"]
        for i, text in enumerate(info):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def step_replay(self, steps_iter, elapsed_ms: int, budget_ms: float) -> float:
        """Advances the replay by as many steps as the elapsed time pays for."""
        try:
            if self.instant:
                for _ in steps_iter:
                    pass
                self.finished = True
                return 0.0
            if self.delay == 0:
                next(steps_iter)
                return 0.0
            budget_ms += elapsed_ms
            while budget_ms >= self.delay * 1000:
                next(steps_iter)
                budget_ms -= self.delay * 1000
        except StopIteration:
            self.finished = True
        return budget_ms

    def run_loop(self):
        steps_iter = self.replay.run() if self.replay is not None else None
        budget_ms = 0.0

        while self.running:
            self.handle_input()
            elapsed = self.clock.tick(60)

            if steps_iter and not self.finished:
                budget_ms = self.step_replay(steps_iter, elapsed, budget_ms)

            self.draw_grid()
            self.draw_hud()
            pygame.display.flip()

        pygame.quit()
