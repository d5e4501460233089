"""4x4 mini sudoku built by shuffling a solved base grid."""

import random

from flowscroll.tasks.models import DiscreteLevel, GeneratedContent, TaskType

GRID_SIZE = 4
MAX_BLANKS = 10

BASE_GRIDS: tuple[tuple[tuple[int, ...], ...], ...] = (
    ((1, 2, 3, 4), (3, 4, 1, 2), (2, 1, 4, 3), (4, 3, 2, 1)),
    ((1, 2, 3, 4), (3, 4, 1, 2), (2, 3, 4, 1), (4, 1, 2, 3)),
    ((1, 2, 3, 4), (4, 3, 2, 1), (2, 1, 4, 3), (3, 4, 1, 2)),
)

Grid = list[list[int]]


def _transpose(grid: Grid) -> Grid:
    return [list(column) for column in zip(*grid)]


def shuffled_solution(rng: random.Random) -> Grid:
    """
    A solved grid from a random base, value relabeling, row/column swaps
    within each 2x2 band, band swaps and an optional transpose. Every step
    preserves the row, column and box constraints.
    """
    base = rng.choice(BASE_GRIDS)
    relabel = list(range(1, GRID_SIZE + 1))
    rng.shuffle(relabel)
    grid = [[relabel[value - 1] for value in row] for row in base]

    for _ in range(2):
        if rng.random() > 0.5:
            grid[0], grid[1] = grid[1], grid[0]
        if rng.random() > 0.5:
            grid[2], grid[3] = grid[3], grid[2]
        if rng.random() > 0.5:
            grid[0], grid[2] = grid[2], grid[0]
            grid[1], grid[3] = grid[3], grid[1]
        grid = _transpose(grid)

    if rng.random() > 0.5:
        grid = _transpose(grid)
    return grid


def blank_count(level: float) -> int:
    return min(MAX_BLANKS, 4 + DiscreteLevel.of(level).value // 2)


def generate_grid(task_type: TaskType, level: float, rng: random.Random) -> GeneratedContent:
    solution = shuffled_solution(rng)
    puzzle = [row[:] for row in solution]

    for cell in rng.sample(range(GRID_SIZE * GRID_SIZE), blank_count(level)):
        puzzle[cell // GRID_SIZE][cell % GRID_SIZE] = 0

    return GeneratedContent(
        question="Mini Sudoku",
        content={"puzzle": puzzle, "grid_size": GRID_SIZE},
        solution=solution,
    )

