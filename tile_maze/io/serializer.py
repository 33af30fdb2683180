import json
import struct
import zlib
from array import array
from typing import Any, Dict, Optional, Tuple

from tile_maze.algo.backtracker import MazeGenerator, MazeResult
from tile_maze.core.errors import MazeFormatError
from tile_maze.core.grid import CellState, Coordinate, TileGrid

TEXT_SYMBOLS = {
    CellState.WALL: "#",
    CellState.FLOOR: ".",
    CellState.START: "S",
    CellState.EXIT: "E",
    CellState.UNCARVED: "?",
}
SYMBOL_STATES = {v: k for k, v in TEXT_SYMBOLS.items()}


class MazeSerializer:
    MAGIC = b"TMAZ"
    VERSION = 1

    # Flags
    FLAG_COMPRESSED = 1
    FLAG_SEED_ONLY = 2

    # Start/exit are stored as unsigned shorts
    MAX_COORD = 0xFFFF

    @staticmethod
    def save(result: MazeResult, filepath: str, meta: Dict[str, Any] = None, seed_only=False, compress=False):
        """
        Saves a generated maze to a binary file.
        Format (little endian):
        - MAGIC (4 bytes)
        - VERSION (1 byte)
        - FLAGS (1 byte)
        - WIDTH, HEIGHT (4 bytes each)
        - START_X, START_Y, EXIT_X, EXIT_Y (2 bytes each)
        - META_LEN (2 bytes)
        - META_JSON (META_LEN bytes)
        - DATA_LEN (4 bytes, 0 if seed_only)
        - DATA (compressed or raw)
        """
        meta = dict(meta or {})
        if result.seed is not None:
            meta.setdefault("seed", result.seed)
        if seed_only and meta.get("seed") is None:
            raise ValueError("seed_only requires a seeded maze")
        if seed_only:
            # Lets load() tell whether the seed really rebuilds these cells
            meta["crc32"] = zlib.crc32(result.grid.cells.tobytes())

        coords = (*result.start, *result.exit)
        if max(coords) > MazeSerializer.MAX_COORD:
            raise MazeFormatError(
                f"Start/exit {coords} do not fit the .maze header (max coordinate {MazeSerializer.MAX_COORD})")

        flags = 0
        if compress:
            flags |= MazeSerializer.FLAG_COMPRESSED
        if seed_only:
            flags |= MazeSerializer.FLAG_SEED_ONLY

        meta_bytes = json.dumps(meta).encode('utf-8')
        grid = result.grid

        with open(filepath, "wb") as f:
            f.write(MazeSerializer.MAGIC)
            f.write(struct.pack("<BB", MazeSerializer.VERSION, flags))
            f.write(struct.pack("<II", grid.width, grid.height))
            f.write(struct.pack("<HHHH", *coords))
            f.write(struct.pack("<H", len(meta_bytes)))
            f.write(meta_bytes)

            if seed_only:
                f.write(struct.pack("<I", 0))
            else:
                data = grid.cells.tobytes()
                if compress:
                    data = zlib.compress(data)
                f.write(struct.pack("<I", len(data)))
                f.write(data)

    @staticmethod
    def _read(f, size: int) -> bytes:
        data = f.read(size)
        if len(data) != size:
            raise MazeFormatError("Truncated maze file")
        return data

    @staticmethod
    def load(filepath: str) -> Tuple[MazeResult, Dict[str, Any]]:
        read = MazeSerializer._read
        with open(filepath, "rb") as f:
            if f.read(4) != MazeSerializer.MAGIC:
                raise MazeFormatError(f"{filepath}: invalid file format")

            version, flags = struct.unpack("<BB", read(f, 2))
            if version != MazeSerializer.VERSION:
                raise MazeFormatError(f"{filepath}: unsupported version {version}")
            width, height = struct.unpack("<II", read(f, 8))
            sx, sy, ex, ey = struct.unpack("<HHHH", read(f, 8))
            meta_len = struct.unpack("<H", read(f, 2))[0]
            meta = json.loads(read(f, meta_len).decode('utf-8'))
            data_len = struct.unpack("<I", read(f, 4))[0]

            if flags & MazeSerializer.FLAG_SEED_ONLY:
                # Rebuild from the stored seed; the result must match the header
                seed = meta.get("seed")
                if isinstance(seed, bool) or not isinstance(seed, int):
                    raise MazeFormatError(f"{filepath}: seed-only file without an integer seed")
                result = MazeGenerator().generate(width, height, seed=seed)
                crc = meta.get("crc32")
                if (result.width, result.height, result.start, result.exit) != (width, height, (sx, sy), (ex, ey)) \
                        or (crc is not None and crc != zlib.crc32(result.grid.cells.tobytes())):
                    raise MazeFormatError(f"{filepath}: seed does not reproduce the stored maze")
                return result, meta

            data = read(f, data_len)
            if flags & MazeSerializer.FLAG_COMPRESSED:
                try:
                    data = zlib.decompress(data)
                except zlib.error as e:
                    raise MazeFormatError(f"{filepath}: corrupt cell data") from e
            if len(data) != width * height:
                raise MazeFormatError(f"{filepath}: expected {width * height} cells, got {len(data)}")

            grid = TileGrid(width, height)
            grid.cells = array('B', data)
            grid.freeze()
            return MazeResult(grid, Coordinate(sx, sy), Coordinate(ex, ey), meta.get("seed")), meta

    @staticmethod
    def to_text(result: MazeResult) -> str:
        grid = result.grid
        rows = []
        for y in range(grid.height):
            row = grid.cells[y * grid.width:(y + 1) * grid.width]
            rows.append("".join(TEXT_SYMBOLS[CellState(v)] for v in row))
        return "\n".join(rows)

    @staticmethod
    def from_text(text: str) -> MazeResult:
        rows = [line for line in text.strip().splitlines() if line]
        if not rows or any(len(r) != len(rows[0]) for r in rows):
            raise MazeFormatError("Text maze must be a non-empty rectangle")

        grid = TileGrid(len(rows[0]), len(rows))
        start = exit_ = None
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch not in SYMBOL_STATES:
                    raise MazeFormatError(f"Unknown symbol {ch!r} at ({x}, {y})")
                state = SYMBOL_STATES[ch]
                grid.set(x, y, state)
                if state == CellState.START:
                    if start is not None:
                        raise MazeFormatError(f"Second 'S' at ({x}, {y}), first at {tuple(start)}")
                    start = Coordinate(x, y)
                elif state == CellState.EXIT:
                    if exit_ is not None:
                        raise MazeFormatError(f"Second 'E' at ({x}, {y}), first at {tuple(exit_)}")
                    exit_ = Coordinate(x, y)
        if start is None or exit_ is None:
            raise MazeFormatError("Text maze needs one 'S' and one 'E'")
        return MazeResult(grid.freeze(), start, exit_)
