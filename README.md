# minirel

The lower layers of a small relational storage engine, meant for learning
how a database is built from the bottom up.

- **Paged files** (`minirel.dbfile`): `File` stores fixed-size pages on
  disk, with page 0 as a `DBHeader` (free-list head, first data page,
  page count). Disposed pages go on a free list and are handed out again
  by `allocate_page`. `DB` creates, destroys, opens and closes files and
  keeps an `OpenFileTable` so that a file opened twice shares one `File`
  object with an open count.
- **Buffer pool** (`minirel.buffer`): `BufferManager` holds a fixed number
  of page frames, chooses victims with the clock algorithm, tracks pin
  counts and dirty pages, and counts accesses, disk reads and disk writes
  in `BufStats` (the `stats` property; `clear_stats` resets them).
  `BufHashTable` maps `(file, page number)` to a frame.
- **Schema records** (`minirel.schema`): `RelDesc` and `AttrDesc` catalog
  entries with `to_bytes` / `from_bytes` in their fixed binary layout,
  `AttrInfo` for attributes named in a command, and the `Datatype` and
  `Operator` enumerations.
- **Join hashing** (`minirel.joinhash`): `JoinHashTable` takes outer
  tuples as raw record bytes and returns the record ids whose join
  attribute equals a probe value (raw bytes or a Python value).
- **Status codes** (`minirel.errors`): failures are raised as
  `MinirelError`, whose `status` is a `Status`; `error_message`,
  `format_error` and `print_error` give the text for a status.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Using the storage layer

```python
from minirel.buffer import BufferManager
from minirel.dbfile import DB
from minirel.errors import MinirelError, error_message

buffers = BufferManager(100, 1024)
db = DB(buffers, 1024)

db.create_file("relcat")
relcat = db.open_file("relcat")

page_no, page = buffers.alloc_page(relcat)   # pinned, zero-filled bytearray
page[:5] = b"hello"
buffers.unpin_page(relcat, page_no, True)    # mark dirty

db.close_file(relcat)                        # last close flushes its pages

try:
    db.create_file("relcat")
except MinirelError as exc:
    print(error_message(exc.status))         # file exists already

buffers.close()                              # write back anything still dirty
```

`BufferManager` can also be used as a context manager, which calls
`close` on exit. `describe()` returns a listing of every frame and its pin
count.

## Command-line tools

`minirel-datagen` writes the sample data files:

```
minirel-datagen soaps [DIRECTORY]              # soaps.data and stars.data
minirel-datagen rels [DIRECTORY] [--seed N]    # rel500.data and rel1000.data
minirel-datagen wi COUNT OUTPUT [--seed N]     # shuffled 0..COUNT-1 as 4-byte ints
minirel-datagen show [PATH ...]                # print rel tuples, tab separated
```

`minirel-dbdestroy` removes a database directory after asking for
confirmation; an answer starting with `y` or `Y` deletes it, any other
answer leaves it in place:

```
minirel-dbdestroy mydb
```

## What this package does not do

It stops at the file, buffer and record-layout layers. There are no heap
files or record scans, no catalog relations built from `RelDesc` and
`AttrDesc`, no command that creates a new database, and no query
interpreter: creating relations, loading, inserting, deleting, selecting
and joining tuples are not provided. `JoinHashTable` is a building block
for a join, not a join itself.