"""Status codes and error reporting for the storage layers."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO


class Status(IntEnum):
    """Status codes reported by the database layers."""

    OK = 0
    NOTUSED1 = -999

    # File and DB errors
    BADFILEPTR = -998
    BADFILE = -997
    FILETABFULL = -996
    FILEOPEN = -995
    FILENOTOPEN = -994
    UNIXERR = -993
    BADPAGEPTR = -992
    BADPAGENO = -991
    FILEEXISTS = -990

    # Buffer manager and hash table errors
    HASHTBLERROR = -989
    HASHNOTFOUND = -988
    BUFFEREXCEEDED = -987
    PAGENOTPINNED = -986
    BADBUFFER = -985
    PAGEPINNED = -984

    # Page errors
    NOSPACE = -983
    NORECORDS = -982
    ENDOFPAGE = -981
    INVALIDSLOTNO = -980
    INVALIDRECLEN = -979

    # Heap file errors
    BADRID = -978
    BADRECPTR = -977
    BADSCANPARM = -976
    BADSCANID = -975
    SCANTABFULL = -974
    FILEEOF = -973
    FILEHDRFULL = -972

    # Index errors
    BADINDEXPARM = -971
    RECNOTFOUND = -970
    BUCKETFULL = -969
    DIROVERFLOW = -968
    NONUNIQUEENTRY = -967
    NOMORERECS = -966

    # Sorted file errors
    BADSORTPARM = -965
    INSUFMEM = -964

    # Catalog errors
    BADCATPARM = -963
    RELNOTFOUND = -962
    ATTRNOTFOUND = -961
    NAMETOOLONG = -960
    DUPLATTR = -959
    RELEXISTS = -958
    NOINDEX = -957
    INDEXEXISTS = -956
    ATTRTOOLONG = -955

    # Query errors
    ATTRTYPEMISMATCH = -954
    TMP_RES_EXISTS = -953

    NOTUSED2 = -952


_MESSAGES: dict[Status, str] = {
    Status.OK: "no error",
    Status.BADFILEPTR: "bad file pointer",
    Status.BADFILE: "bad filename",
    Status.FILETABFULL: "open file table full",
    Status.FILEOPEN: "file open",
    Status.FILENOTOPEN: "file not open",
    Status.UNIXERR: "Unix error",
    Status.BADPAGEPTR: "bad page pointer",
    Status.BADPAGENO: "bad page number",
    Status.FILEEXISTS: "file exists already",
    Status.HASHTBLERROR: "hash table error",
    Status.HASHNOTFOUND: "hash entry not found",
    Status.BUFFEREXCEEDED: "buffer pool full",
    Status.PAGENOTPINNED: "page not pinned",
    Status.BADBUFFER: "buffer pool corrupted",
    Status.PAGEPINNED: "page still pinned",
    Status.NOSPACE: "no space on page for record",
    Status.NORECORDS: "page is empty - no records",
    Status.ENDOFPAGE: "last record on page",
    Status.INVALIDSLOTNO: "invalid slot number",
    Status.INVALIDRECLEN: "specified record length <= 0",
    Status.BADRID: "bad record id",
    Status.BADRECPTR: "bad record pointer",
    Status.BADSCANPARM: "bad scan parameter",
    Status.SCANTABFULL: "scan table full",
    Status.FILEEOF: "end of file encountered",
    Status.FILEHDRFULL: "heapfile hdear page is full",
    Status.BADINDEXPARM: "bad index parameter",
    Status.RECNOTFOUND: "no such record",
    Status.BUCKETFULL: "bucket full",
    Status.DIROVERFLOW: "directory is full",
    Status.NONUNIQUEENTRY: "nonunique entry",
    Status.NOMORERECS: "no more records",
    Status.BADSORTPARM: "bad sort parameter",
    Status.INSUFMEM: "insufficient memory",
    Status.BADCATPARM: "bad catalog parameter",
    Status.RELNOTFOUND: "relation not in catalog",
    Status.ATTRNOTFOUND: "attribute not in catalog",
    Status.NAMETOOLONG: "name too long",
    Status.ATTRTOOLONG: "attributes too long",
    Status.DUPLATTR: "duplicate attribute names",
    Status.RELEXISTS: "relation exists already",
    Status.NOINDEX: "no index exists",
    Status.ATTRTYPEMISMATCH: "attribute type mismatch",
    Status.TMP_RES_EXISTS: "temp result already exists",
    Status.INDEXEXISTS: "index exists already",
}


def error_message(status: int) -> str:
    """Return the human-readable message for a status code."""
    try:
        known = Status(status)
    except ValueError:
        return f"undefined error status: {int(status)}"
    message = _MESSAGES.get(known)
    if message is None:
        return f"undefined error status: {int(known)}"
    return message


def format_error(status: int) -> str:
    """Return the full error line for a status code, without newline."""
    return f"Error: {error_message(status)}"


def print_error(status: int, stream: TextIO | None = None) -> None:
    """Write the error line for a status code to a stream (stderr by default)."""
    out = sys.stderr if stream is None else stream
    out.write(format_error(status) + "\n")


class MinirelError(Exception):
    """An operation failed with a status code."""

    def __init__(self, status: int) -> None:
        try:
            self.status: int = Status(status)
        except ValueError:
            self.status = int(status)
        super().__init__(error_message(self.status))