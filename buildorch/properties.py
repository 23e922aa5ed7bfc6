"""Project property sources: Java-style .properties files and command-line pairs."""

import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple


BLANKS = ' \t\f'
SEPARATORS = '=:'
ESCAPE_PATTERN = re.compile(r'\\(u[0-9a-fA-F]{4}|.)', re.DOTALL)
CONTROL_ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (first line number, logical line), joining backslash continuations."""
    pending: Optional[str] = None
    start = 0
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.lstrip(BLANKS)
        if pending is None:
            if not line or line[0] in '#!':
                continue
            pending, start = '', line_number

        trailing = len(line) - len(line.rstrip('\\'))
        if trailing % 2:
            pending += line[:-1]
            continue
        yield start, pending + line
        pending = None

    if pending is not None:
        yield start, pending


def _split_entry(line: str) -> Tuple[str, str]:
    """Split a logical line at the first unescaped separator or blank."""
    index = 0
    while index < len(line):
        char = line[index]
        if char == '\\':
            index += 2
            continue
        if char in SEPARATORS or char in BLANKS:
            break
        index += 1

    key, rest = line[:index], line[index:].lstrip(BLANKS)
    if rest and rest[0] in SEPARATORS:
        rest = rest[1:].lstrip(BLANKS)
    return key, rest


def _unescape(text: str, line_number: int) -> str:
    def replace(match) -> str:
        escaped = match.group(1)
        if escaped == 'u':
            raise ValueError(f"Malformed \\uXXXX escape on line {line_number}")
        if len(escaped) == 5:
            return chr(int(escaped[1:], 16))
        return CONTROL_ESCAPES.get(escaped, escaped)

    return ESCAPE_PATTERN.sub(replace, text)


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse .properties content the way gradle.properties is read.

    Keys end at the first unescaped '=', ':' or blank; blanks around the
    separator are skipped. Lines starting with '#' or '!' are comments, a
    line ending in an odd number of backslashes continues on the next line,
    and \\t, \\n, \\r, \\f, \\uXXXX and backslash-escaped characters are
    decoded. A key with no value maps to ''. A later duplicate key wins.

    Raises:
        ValueError: If a key is empty or a \\u escape is malformed
    """
    properties: Dict[str, str] = {}
    for line_number, line in _logical_lines(text):
        raw_key, raw_value = _split_entry(line)
        key = _unescape(raw_key, line_number)
        if not key:
            raise ValueError(f"Empty property name on line {line_number}")
        properties[key] = _unescape(raw_value, line_number)
    return properties


def load_properties(path: Path, encoding: str = 'utf-8') -> Dict[str, str]:
    """Read a properties file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Properties file not found: {path}")
    with open(path, 'r', encoding=encoding) as f:
        return parse_properties(f.read())


def parse_property_args(pairs: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse KEY=VALUE command-line pairs."""
    properties: Dict[str, str] = {}
    for item in pairs or []:
        if '=' not in item:
            raise ValueError(f"Invalid property format: {item}. Expected KEY=VALUE")
        key, value = item.split('=', 1)
        if not key:
            raise ValueError(f"Invalid property format: {item}. Property name cannot be empty")
        properties[key] = value
    return properties
