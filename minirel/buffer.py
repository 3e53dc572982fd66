"""Buffer pool with clock replacement over database file pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .dbfile import DEFAULT_PAGE_SIZE, File
from .errors import MinirelError, Status


class BufHashTable:
    """Maps (file, page number) pairs to buffer frame numbers."""

    def __init__(self) -> None:
        self._entries: dict[tuple[File, int], int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def insert(self, file: File, page_no: int, frame_no: int) -> None:
        """Record that a page lives in a frame; each page may appear once."""
        key = (file, page_no)
        if key in self._entries:
            raise MinirelError(Status.HASHTBLERROR)
        self._entries[key] = frame_no

    def lookup(self, file: File, page_no: int) -> int:
        """Return the frame holding a page."""
        try:
            return self._entries[(file, page_no)]
        except KeyError:
            raise MinirelError(Status.HASHNOTFOUND) from None

    def remove(self, file: File, page_no: int) -> None:
        """Forget where a page lives."""
        if self._entries.pop((file, page_no), None) is None:
            raise MinirelError(Status.HASHTBLERROR)


@dataclass
class _Frame:
    """Bookkeeping for one buffer frame."""

    frame_no: int
    file: File | None = None
    page_no: int = -1
    pin_count: int = 0
    dirty: bool = False
    valid: bool = False
    refbit: bool = False

    def clear(self) -> None:
        self.pin_count = 0
        self.file = None
        self.page_no = -1
        self.dirty = False
        self.valid = False

    def assign(self, file: File, page_no: int) -> None:
        self.file = file
        self.page_no = page_no
        self.pin_count = 1
        self.dirty = False
        self.valid = True
        self.refbit = True


@dataclass
class BufStats:
    """Buffer pool usage counters."""

    accesses: int = 0
    diskreads: int = 0
    diskwrites: int = 0

    def clear(self) -> None:
        """Reset all counters to zero."""
        self.accesses = 0
        self.diskreads = 0
        self.diskwrites = 0


@dataclass
class _Pool:
    frames: list[_Frame] = field(default_factory=list)
    pages: list[bytearray] = field(default_factory=list)


class BufferManager:
    """A fixed-size pool of page frames shared by all open files."""

    def __init__(self, num_bufs: int, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if num_bufs < 1:
            raise ValueError("buffer pool needs at least one frame")
        self.num_bufs = num_bufs
        self.page_size = page_size
        self._frames = [_Frame(i) for i in range(num_bufs)]
        self._pool = [bytearray(page_size) for _ in range(num_bufs)]
        self._table = BufHashTable()
        self._clock_hand = num_bufs - 1
        self._stats = BufStats()

    def __enter__(self) -> "BufferManager":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def stats(self) -> BufStats:
        """Current usage counters."""
        return self._stats

    def _advance_clock(self) -> None:
        self._clock_hand = (self._clock_hand + 1) % self.num_bufs

    def _alloc_buf(self) -> int:
        """Pick a frame with the clock algorithm, writing out its old page."""
        found = False
        scanned = 0
        while scanned < 2 * self.num_bufs:
            self._advance_clock()
            scanned += 1
            frame = self._frames[self._clock_hand]
            if not frame.valid:
                break
            if not frame.refbit:
                if frame.pin_count == 0:
                    try:
                        self._table.remove(frame.file, frame.page_no)
                    except MinirelError:
                        pass
                    found = True
                    break
            else:
                self._stats.accesses += 1
                frame.refbit = False

        if not found and scanned >= 2 * self.num_bufs:
            raise MinirelError(Status.BUFFEREXCEEDED)

        frame = self._frames[self._clock_hand]
        if frame.dirty:
            self._stats.diskwrites += 1
            frame.file.write_page(frame.page_no, bytes(self._pool[self._clock_hand]))
        return self._clock_hand

    def read_page(self, file: File, page_no: int) -> bytearray:
        """Pin a page in the pool and return its mutable contents."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            frame_no = self._alloc_buf()
            self._stats.diskreads += 1
            self._pool[frame_no][:] = file.read_page(page_no)
            self._frames[frame_no].assign(file, page_no)
            self._table.insert(file, page_no, frame_no)
        else:
            frame = self._frames[frame_no]
            frame.refbit = True
            frame.pin_count += 1
        return self._pool[frame_no]

    def unpin_page(self, file: File, page_no: int, dirty: bool) -> None:
        """Release one pin on a page, marking it dirty if asked."""
        frame = self._frames[self._table.lookup(file, page_no)]
        if dirty:
            frame.dirty = True
        if frame.pin_count == 0:
            raise MinirelError(Status.PAGENOTPINNED)
        frame.pin_count -= 1

    def alloc_page(self, file: File) -> tuple[int, bytearray]:
        """Allocate a new page in a file and pin it; return its number and contents."""
        page_no = file.allocate_page()
        frame_no = self._alloc_buf()
        page = self._pool[frame_no]
        page[:] = bytes(self.page_size)
        self._frames[frame_no].assign(file, page_no)
        self._table.insert(file, page_no, frame_no)
        return page_no, page

    def flush_file(self, file: File) -> None:
        """Write out a file's dirty pages and drop all its pages from the pool."""
        for frame_no, frame in enumerate(self._frames):
            if frame.valid and frame.file == file:
                if frame.pin_count > 0:
                    raise MinirelError(Status.PAGEPINNED)
                if frame.dirty:
                    frame.file.write_page(frame.page_no, bytes(self._pool[frame_no]))
                    frame.dirty = False
                try:
                    self._table.remove(file, frame.page_no)
                except MinirelError:
                    pass
                frame.file = None
                frame.page_no = -1
                frame.valid = False
            elif not frame.valid and frame.file is not None and frame.file == file:
                raise MinirelError(Status.BADBUFFER)

    def dispose_page(self, file: File, page_no: int) -> None:
        """Drop a page from the pool and return it to the file's free list."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            pass
        else:
            self._frames[frame_no].clear()
        try:
            self._table.remove(file, page_no)
        except MinirelError:
            pass
        file.dispose_page(page_no)

    def describe(self) -> str:
        """Return a listing of every frame with its pin count."""
        lines = ["\nPrint buffer...\n"]
        for frame_no, frame in enumerate(self._frames):
            raw = bytes(self._pool[frame_no]).split(b"\0", 1)[0]
            text = f"{frame_no}\t{raw.decode('latin-1')}\tpinCnt: {frame.pin_count}"
            if frame.valid:
                text += "\tvalid\n"
            lines.append(text + "\n")
        return "".join(lines)

    def print_self(self, stream: TextIO) -> None:
        """Write the frame listing to a stream."""
        stream.write(self.describe())

    def clear_stats(self) -> None:
        """Reset the usage counters."""
        self._stats.clear()

    def close(self) -> None:
        """Write every valid dirty page back to its file."""
        for frame_no, frame in enumerate(self._frames):
            if frame.valid and frame.dirty:
                frame.file.write_page(frame.page_no, bytes(self._pool[frame_no]))
                frame.dirty = False