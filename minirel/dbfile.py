"""Paged database files and the table of open files."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from .errors import MinirelError, Status

DEFAULT_PAGE_SIZE = 1024

_HEADER = struct.Struct("<iii")


class _FlushesFiles(Protocol):
    def flush_file(self, file: "File") -> None: ...


@dataclass
class DBHeader:
    """Contents of page 0 of a database file."""

    next_free: int = -1
    first_page: int = -1
    num_pages: int = 1

    @classmethod
    def from_bytes(cls, data: bytes) -> "DBHeader":
        """Decode a header from the start of a page."""
        if len(data) < _HEADER.size:
            raise MinirelError(Status.BADPAGEPTR)
        next_free, first_page, num_pages = _HEADER.unpack_from(data)
        return cls(next_free, first_page, num_pages)

    def to_bytes(self, page_size: int = DEFAULT_PAGE_SIZE) -> bytes:
        """Encode the header as a full zero-padded page."""
        packed = _HEADER.pack(self.next_free, self.first_page, self.num_pages)
        return packed.ljust(page_size, b"\0")


def _free_link(data: bytes) -> int:
    return struct.unpack_from("<i", data)[0]


class File:
    """A database file made of fixed-size pages, with page 0 as its header."""

    def __init__(self, name: str, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.name = os.fspath(name)
        self.page_size = page_size
        self.open_count = 0
        self._handle: BinaryIO | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"File({self.name!r}, open_count={self.open_count})"

    def open(self) -> None:
        """Open the file, or increase the open count if already open."""
        if self.open_count == 0:
            try:
                self._handle = open(self.name, "r+b", buffering=0)
            except OSError as exc:
                raise MinirelError(Status.UNIXERR) from exc
        self.open_count += 1

    def close(self, buffer_manager: _FlushesFiles | None = None) -> None:
        """Decrease the open count; really close when it reaches zero."""
        if self.open_count <= 0:
            raise MinirelError(Status.FILENOTOPEN)
        self.open_count -= 1
        if self.open_count == 0:
            if buffer_manager is not None:
                try:
                    buffer_manager.flush_file(self)
                except MinirelError:
                    pass
            handle, self._handle = self._handle, None
            try:
                if handle is not None:
                    handle.close()
            except OSError as exc:
                raise MinirelError(Status.UNIXERR) from exc

    def _read(self, page_no: int) -> bytes:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * self.page_size)
            data = self._handle.read(self.page_size)
        except (OSError, ValueError) as exc:
            raise MinirelError(Status.UNIXERR) from exc
        if data is None or len(data) != self.page_size:
            raise MinirelError(Status.UNIXERR)
        return data

    def _write(self, page_no: int, data: bytes) -> None:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * self.page_size)
            written = self._handle.write(data)
        except (OSError, ValueError) as exc:
            raise MinirelError(Status.UNIXERR) from exc
        if written != self.page_size:
            raise MinirelError(Status.UNIXERR)

    def _header(self) -> DBHeader:
        return DBHeader.from_bytes(self._read(0))

    def allocate_page(self) -> int:
        """Allocate a page from the free list, or extend the file."""
        header = self._header()
        if header.next_free != -1:
            page_no = header.next_free
            header.next_free = _free_link(self._read(page_no))
        else:
            page_no = header.num_pages
            self._write(page_no, bytes(self.page_size))
            header.num_pages += 1
            if header.first_page == -1:
                header.first_page = page_no
        self._write(0, header.to_bytes(self.page_size))
        return page_no

    def dispose_page(self, page_no: int) -> None:
        """Put a page on the free list; the first data page cannot be freed."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        header = self._header()
        if header.first_page == page_no or page_no >= header.num_pages:
            raise MinirelError(Status.BADPAGENO)
        self._read(page_no)
        away = struct.pack("<i", header.next_free).ljust(self.page_size, b"\0")
        header.next_free = page_no
        self._write(page_no, away)
        self._write(0, header.to_bytes(self.page_size))

    def read_page(self, page_no: int) -> bytes:
        """Return the contents of a data page."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        return self._read(page_no)

    def write_page(self, page_no: int, data: bytes) -> None:
        """Write a full page of data to a data page."""
        if data is None or len(data) != self.page_size:
            raise MinirelError(Status.BADPAGEPTR)
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        self._write(page_no, bytes(data))

    def first_page(self) -> int:
        """Return the number of the first data page, or -1 if none."""
        return self._header().first_page


class OpenFileTable:
    """Maps file names to their open File objects."""

    def __init__(self) -> None:
        self._files: dict[str, File] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __len__(self) -> int:
        return len(self._files)

    def insert(self, name: str, file: File) -> None:
        """Register an open file; a name may be registered only once."""
        if name in self._files:
            raise MinirelError(Status.HASHTBLERROR)
        self._files[name] = file

    def find(self, name: str) -> File:
        """Return the open file with this name."""
        try:
            return self._files[name]
        except KeyError:
            raise MinirelError(Status.HASHNOTFOUND) from None

    def erase(self, name: str) -> None:
        """Remove a file from the table."""
        if self._files.pop(name, None) is None:
            raise MinirelError(Status.HASHTBLERROR)


class DB:
    """Creates, destroys, opens and closes database files."""

    def __init__(
        self,
        buffer_manager: _FlushesFiles | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if _HEADER.size >= page_size:
            raise ValueError(
                f"header size {_HEADER.size} must be smaller than page size {page_size}"
            )
        self.buffer_manager = buffer_manager
        self.page_size = page_size
        self.open_files = OpenFileTable()

    def create_file(self, name: str) -> None:
        """Create a new file holding only a header page."""
        if not name:
            raise MinirelError(Status.BADFILE)
        name = os.fspath(name)
        if name in self.open_files:
            raise MinirelError(Status.FILEEXISTS)
        try:
            with open(name, "xb") as handle:
                handle.write(DBHeader().to_bytes(self.page_size))
        except FileExistsError as exc:
            raise MinirelError(Status.FILEEXISTS) from exc
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc

    def destroy_file(self, name: str) -> None:
        """Delete a file that is not currently open."""
        if not name:
            raise MinirelError(Status.BADFILE)
        name = os.fspath(name)
        if name in self.open_files:
            raise MinirelError(Status.FILEOPEN)
        try:
            os.remove(name)
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc

    def open_file(self, name: str) -> File:
        """Open a file, sharing the File object if it is already open."""
        if not name:
            raise MinirelError(Status.BADFILE)
        name = os.fspath(name)
        if name in self.open_files:
            file = self.open_files.find(name)
            file.open()
            return file
        file = File(name, self.page_size)
        file.open()
        self.open_files.insert(name, file)
        return file

    def close_file(self, file: File | None) -> None:
        """Close a file; forget it once nobody has it open."""
        if file is None:
            raise MinirelError(Status.BADFILEPTR)
        try:
            file.close(self.buffer_manager)
        except MinirelError:
            pass
        if file.open_count == 0:
            try:
                self.open_files.erase(file.name)
            except MinirelError:
                raise MinirelError(Status.BADFILEPTR) from None