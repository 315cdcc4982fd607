"""
Line-level scanning and value substitution for weapon script files.

Weapon scripts are brace-delimited KeyValues text. Only a handful of keys
matter here, so the file is treated as an indexed list of lines and each
lookup is an independent pass over that list. Lines keep their original
endings so that joining them reproduces the file byte for byte.
"""
from pathlib import Path
from typing import Dict, List, Optional

from core.exceptions import FileAccessError, MalformedFieldError, NotFoundError


CROSSHAIR_KEY = '"crosshair"'
FILE_KEY = '"file"'
X_KEY = '"x"'
Y_KEY = '"y"'
WIDTH_KEY = '"width"'
HEIGHT_KEY = '"height"'
BLOCK_END = "}"

EXPLOSION_KEYS = (
    '"ExplosionEffect"',
    '"ExplosionPlayerEffect"',
    '"ExplosionWaterEffect"',
)


def read_script(path: Path) -> str:
    """
    Read a weapon script as text.

    Raises:
        NotFoundError: File does not exist
        FileAccessError: File could not be read or decoded
    """
    path = Path(path)
    if not path.exists():
        raise NotFoundError(f"{path.name} doesn't exist")

    try:
        # newline='' keeps CRLF endings intact for write-back
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(f"Failed to open {path.name}: {e}") from e


def split_lines(text: str) -> List[str]:
    """Split text on '\\n' keeping line endings, so ''.join() is lossless."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def line_has_key(line: str, key: str) -> bool:
    """Check if the trimmed line starts with the quoted key token."""
    return line.strip().startswith(key)


def find_key(lines: List[str], key: str, start: int = 0) -> Optional[int]:
    """Index of the first line at or after ``start`` starting with ``key``."""
    for index in range(start, len(lines)):
        if line_has_key(lines[index], key):
            return index
    return None


def extract_value(line: str) -> str:
    """
    Extract the value of a key line.

    The value is the second whitespace-separated token with every quote
    character removed.

    Raises:
        MalformedFieldError: Line has no second token
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedFieldError(f"Failed to get value from line: {line.strip()}")
    return tokens[1].replace('"', '')


def replace_value(line: str, new_value: str) -> str:
    """
    Replace the value token of a key line.

    Only the characters of the value token change. Indentation, quoting,
    trailing comments and the line ending are kept as they were.

    Raises:
        MalformedFieldError: Line has no second token
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise MalformedFieldError(f"Failed to get value from line: {line.strip()}")

    key_token, raw_token = tokens[0], tokens[1]
    key_end = line.index(key_token) + len(key_token)
    token_start = line.index(raw_token, key_end)
    token_end = token_start + len(raw_token)

    return line[:token_start] + _replace_token(raw_token, new_value) + line[token_end:]


def _replace_token(raw_token: str, new_value: str) -> str:
    """Swap the unquoted part of a token, keeping its quotes and any glued suffix."""
    if raw_token.startswith('"'):
        close = raw_token.find('"', 1)
        if close != -1:
            return '"' + new_value + raw_token[close:]

    inner = raw_token.strip('"')
    if not inner:
        # Empty string literal such as ""
        return f'"{new_value}"'

    inner_start = raw_token.index(inner)
    return raw_token[:inner_start] + new_value + raw_token[inner_start + len(inner):]


def find_crosshair_header(lines: List[str]) -> Optional[int]:
    """Index of the first "crosshair" line."""
    return find_key(lines, CROSSHAIR_KEY)


def find_crosshair_file(lines: List[str]) -> Optional[int]:
    """
    Index of the "file" line belonging to the first crosshair block.

    The line right after the "crosshair" header is the opening brace and
    is skipped.
    """
    header = find_crosshair_header(lines)
    if header is None:
        return None
    return find_key(lines, FILE_KEY, header + 2)


def crosshair_block_fields(lines: List[str]) -> Dict[str, List[int]]:
    """
    Map crosshair block keys to the line indexes holding them.

    Scanning starts after the "crosshair" header and ends at the first
    line containing a closing brace that is not itself a key line.
    """
    header = find_crosshair_header(lines)
    if header is None:
        return {}

    fields: Dict[str, List[int]] = {}
    for index in range(header + 1, len(lines)):
        stripped = lines[index].strip()
        for key in (FILE_KEY, X_KEY, Y_KEY, WIDTH_KEY, HEIGHT_KEY):
            if stripped.startswith(key):
                fields.setdefault(key, []).append(index)
                break
        else:
            if BLOCK_END in stripped:
                break

    return fields


def explosion_fields(lines: List[str]) -> Dict[str, List[int]]:
    """Map each Explosion*Effect key to every line index holding it."""
    fields: Dict[str, List[int]] = {key: [] for key in EXPLOSION_KEYS}
    for index, line in enumerate(lines):
        stripped = line.strip()
        for key in EXPLOSION_KEYS:
            if stripped.startswith(key):
                fields[key].append(index)
                break
    return fields


def unquote_key(key: str) -> str:
    return key.strip('"')
