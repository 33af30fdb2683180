class MazeError(Exception):
    """Base class for everything the maze core raises."""


class InvalidDimensions(MazeError, ValueError):
    def __init__(self, width, height, reason: str = "dimensions must be positive integers"):
        self.width = width
        self.height = height
        super().__init__(f"Invalid maze size {width!r}x{height!r}: {reason}")


class NoValidBoundaryCell(MazeError):
    def __init__(self, role: str, width: int, height: int):
        self.role = role
        super().__init__(f"No valid boundary cell left for {role} on a {width}x{height} maze")


class RandomnessUnavailable(MazeError):
    pass


class GridFrozenError(MazeError):
    pass


class MazeFormatError(MazeError, ValueError):
    pass
