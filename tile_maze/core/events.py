import struct
from typing import Iterator, List, NamedTuple, Tuple

from tile_maze.core.errors import MazeFormatError

# Event Types
EVT_VISIT = 0x02
EVT_CARVE = 0x03
EVT_BACKTRACK = 0x04
EVT_START = 0x05
EVT_EXIT = 0x06

EVENT_NAMES = {
    EVT_VISIT: "visit",
    EVT_CARVE: "carve",
    EVT_BACKTRACK: "backtrack",
    EVT_START: "start",
    EVT_EXIT: "exit",
}

MAGIC = b"MAZELOG"
RECORD = struct.Struct(">BHH")
# Coordinates are packed as unsigned shorts
MAX_LOG_SIZE = 0xFFFF + 1


class StepEvent(NamedTuple):
    kind: int
    x: int
    y: int

    def __str__(self) -> str:
        return f"{EVENT_NAMES.get(self.kind, self.kind)}({self.x}, {self.y})"


def log_event(writer, event: StepEvent):
    """Dispatches a step event to the matching log_* method of a writer."""
    if event.kind == EVT_VISIT:
        writer.log_visit(event.x, event.y)
    elif event.kind == EVT_CARVE:
        writer.log_carve(event.x, event.y)
    elif event.kind == EVT_BACKTRACK:
        writer.log_backtrack(event.x, event.y)
    elif event.kind == EVT_START:
        writer.log_start(event.x, event.y)
    elif event.kind == EVT_EXIT:
        writer.log_exit(event.x, event.y)
    else:
        raise ValueError(f"Unknown event type {event.kind:#x}")


class StepRecorder:
    """
    In-memory event sink. Collects the carve steps of one generation so a
    renderer can replay them at its own pace.
    """
    def __init__(self):
        self.width = 0
        self.height = 0
        self.events: List[StepEvent] = []

    def write_header(self, width: int, height: int):
        self.width = width
        self.height = height
        self.events.clear()

    def log_visit(self, x: int, y: int):
        self.events.append(StepEvent(EVT_VISIT, x, y))

    def log_carve(self, x: int, y: int):
        self.events.append(StepEvent(EVT_CARVE, x, y))

    def log_backtrack(self, x: int, y: int):
        self.events.append(StepEvent(EVT_BACKTRACK, x, y))

    def log_start(self, x: int, y: int):
        self.events.append(StepEvent(EVT_START, x, y))

    def log_exit(self, x: int, y: int):
        self.events.append(StepEvent(EVT_EXIT, x, y))

    def close(self):
        pass

    def __iter__(self) -> Iterator[StepEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)


class EventFanout:
    """Forwards every call to several writers, in order."""
    def __init__(self, *writers):
        self.writers = [w for w in writers if w is not None]

    def write_header(self, width: int, height: int):
        for w in self.writers:
            w.write_header(width, height)

    def log_visit(self, x: int, y: int):
        for w in self.writers:
            w.log_visit(x, y)

    def log_carve(self, x: int, y: int):
        for w in self.writers:
            w.log_carve(x, y)

    def log_backtrack(self, x: int, y: int):
        for w in self.writers:
            w.log_backtrack(x, y)

    def log_start(self, x: int, y: int):
        for w in self.writers:
            w.log_start(x, y)

    def log_exit(self, x: int, y: int):
        for w in self.writers:
            w.log_exit(x, y)

    def close(self):
        for w in self.writers:
            w.close()


class EventWriter:
    def __init__(self, filename: str):
        self.filename = filename
        # Opened by write_header once the size is known to fit
        self.file = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def write_header(self, width: int, height: int):
        if width > MAX_LOG_SIZE or height > MAX_LOG_SIZE:
            raise MazeFormatError(
                f"{width}x{height} maze does not fit an event log (max {MAX_LOG_SIZE}x{MAX_LOG_SIZE})")
        # Header: Magic "MAZELOG" + Width (4b) + Height (4b)
        self.file = open(self.filename, "wb")
        self.file.write(MAGIC)
        self.file.write(struct.pack(">II", width, height))

    def _write(self, kind: int, x: int, y: int):
        # 1 byte type + 2 byte X + 2 byte Y; coordinates fit an unsigned short
        self.file.write(RECORD.pack(kind, x, y))

    def log_visit(self, x: int, y: int):
        self._write(EVT_VISIT, x, y)

    def log_carve(self, x: int, y: int):
        self._write(EVT_CARVE, x, y)

    def log_backtrack(self, x: int, y: int):
        self._write(EVT_BACKTRACK, x, y)

    def log_start(self, x: int, y: int):
        self._write(EVT_START, x, y)

    def log_exit(self, x: int, y: int):
        self._write(EVT_EXIT, x, y)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None


class EventReader:
    def __init__(self, filename: str):
        self.filename = filename
        self.file = open(filename, "rb")
        self.width = 0
        self.height = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def read_header(self) -> Tuple[int, int]:
        magic = self.file.read(len(MAGIC))
        if magic != MAGIC:
            raise MazeFormatError(f"{self.filename}: not an event log")
        data = self.file.read(8)
        if len(data) != 8:
            raise MazeFormatError(f"{self.filename}: truncated header")
        self.width, self.height = struct.unpack(">II", data)
        return self.width, self.height

    def stream_events(self) -> Iterator[StepEvent]:
        while True:
            data = self.file.read(RECORD.size)
            if not data:
                break
            if len(data) != RECORD.size:
                raise MazeFormatError(f"{self.filename}: truncated event record")
            kind, x, y = RECORD.unpack(data)
            if kind not in EVENT_NAMES:
                raise MazeFormatError(f"{self.filename}: unknown event type {kind:#x}")
            yield StepEvent(kind, x, y)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
