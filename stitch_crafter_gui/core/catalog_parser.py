import os
from core.errors import ParseError
from core.thread_color import ThreadColor

# Unicode blocks handed out as pattern symbols, in this order
SYMBOL_RANGES = (
    (0x2190, 0x21FF),  # Arrows
    (0x2200, 0x22FF),  # Mathematical Operators
    (0x2500, 0x257F),  # Box Drawing
)

SYMBOL_CAPACITY = sum(end - start + 1 for start, end in SYMBOL_RANGES)


def symbol_codepoints():
    for start, end in SYMBOL_RANGES:
        yield from range(start, end + 1)


class CatalogParser:
    @staticmethod
    def parse_lines(lines):
        """
        Parses a tab-separated thread catalog.

        Each non-empty line is: id, one or more name fields, R, G, B.
        The last three fields are always the channels; everything between
        the id and the channels is joined with single spaces into the name.
        A non-integer id, a line with fewer than 4 fields or a repeated id
        aborts the load with ParseError. A malformed or out-of-range channel
        degrades to 0 so a partly corrupted catalog still loads.

        Returns a list of ThreadColor in row order, with symbols assigned.
        """
        threads = []
        seen_ids = set()

        for line_number, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line:
                continue

            parts = [p.strip() for p in line.split("\t") if p.strip()]
            if len(parts) < 4:
                raise ParseError(f"expected at least 4 tab-separated fields, got {len(parts)}", line_number)

            try:
                thread_id = int(parts[0])
            except ValueError:
                raise ParseError(f"thread id {parts[0]!r} is not an integer", line_number) from None

            if thread_id in seen_ids:
                raise ParseError(f"duplicate thread id {thread_id}", line_number)
            seen_ids.add(thread_id)

            name = " ".join(parts[1:-3])
            if not name:
                # A 4-field row is id + 3 channels; usually a channel is missing
                print(f"Catalog line {line_number}: thread {thread_id} has no name, check for a missing channel")
            r, g, b = (CatalogParser._parse_channel(v, line_number) for v in parts[-3:])
            threads.append(ThreadColor(id=thread_id, name=name, color=(r, g, b)))

        return CatalogParser.assign_symbols(threads)

    @staticmethod
    def parse_file(file_path):
        """
        Parses a catalog file (UTF-8, optional BOM).
        Read failures propagate as OSError.
        """
        with open(file_path, "r", encoding="utf-8-sig") as f:
            return CatalogParser.parse_lines(f)

    @staticmethod
    def assign_symbols(threads):
        """
        Hands out one codepoint per thread from SYMBOL_RANGES in row order.
        Threads past SYMBOL_CAPACITY keep an empty symbol.
        """
        codepoints = symbol_codepoints()
        result = []
        for thread in threads:
            cp = next(codepoints, None)
            result.append(thread.with_symbol(chr(cp) if cp is not None else ""))
        return result

    @staticmethod
    def _parse_channel(value, line_number):
        try:
            channel = int(value)
        except ValueError:
            channel = -1

        if not 0 <= channel <= 255:
            print(f"Catalog line {line_number}: invalid channel value {value!r}, using 0")
            return 0
        return channel


def load_catalog(source):
    """
    Loads a catalog from a path or from any iterable of text lines.
    """
    if isinstance(source, (str, os.PathLike)):
        return CatalogParser.parse_file(source)
    return CatalogParser.parse_lines(source)
