"""
Preset file parser.

Preset files are a small, hand-authored subset of YAML: top-level
`key: value` pairs and one level of sections. No YAML library is used;
the format has no formal grammar and is parsed line by line.

Line shapes (evaluated per physical line, in file order):

    name: woo                  flat top-level key
    php:                       opens section scope "php"
      memory_limit: "512M"     becomes php.memory_limit

Rules:
- Any line with no leading whitespace closes an open section scope.
- Blank lines and `#` comment lines are ignored and do not close a scope.
- Values are trimmed and unwrapped from one matching pair of quotes.
- Duplicate keys within a scope: last occurrence wins.

Malformed lines raise PresetParseError in strict mode (the default).
Non-strict mode logs and skips them.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional

from .errors import InvalidPresetError, PresetNotFoundError, PresetParseError
from .models import Preset

logger = logging.getLogger(__name__)


_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_SECTION_RE = re.compile(rf"^(?P<name>{_IDENT}):\s*$")
_FLAT_RE = re.compile(rf"^(?P<key>{_IDENT}):\s*(?P<value>\S.*)$")
_NESTED_RE = re.compile(rf"^\s+(?P<key>{_IDENT}):\s*(?P<value>.*)$")


def unquote(value: str) -> str:
    """Trim a value and strip one matching pair of surrounding quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return value


def parse_preset_text(
    text: str,
    source: Optional[Path] = None,
    strict: bool = True,
) -> Preset:
    """
    Parse preset text into a Preset.

    Args:
        text: Preset file contents
        source: Path used in error messages and recorded on the Preset
        strict: Raise on malformed lines instead of skipping them

    Returns:
        Parsed Preset

    Raises:
        PresetParseError: Malformed line in strict mode
        InvalidPresetError: No non-empty `name` key
    """
    where = source or Path("<preset>")
    settings: Dict[str, str] = {}
    sections: Dict[str, Dict[str, str]] = {}
    section: Optional[str] = None

    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        stripped = line.strip()

        if not stripped or stripped.startswith("#"):
            continue

        indented = line[0] in (" ", "\t")

        if not indented:
            # Unindented content always ends the current section
            section = None

            match = _SECTION_RE.match(line)
            if match:
                section = match.group("name")
                sections.setdefault(section, {})
                continue

            match = _FLAT_RE.match(line)
            if match:
                settings[match.group("key")] = unquote(match.group("value"))
                continue

        else:
            match = _NESTED_RE.match(line)
            if match:
                value = unquote(match.group("value") or "")
                if section is not None:
                    sections[section][match.group("key")] = value
                else:
                    settings[match.group("key")] = value
                continue

        if strict:
            raise PresetParseError(where, line_number, line)
        logger.debug("Skipping unparsable preset line %s:%d: %r", where, line_number, line)

    name = settings.get("name", "")
    if not name.strip():
        raise InvalidPresetError(source, "Preset missing 'name' field")

    return Preset(
        name=name,
        description=settings.get("description", ""),
        settings=settings,
        sections=sections,
        source_path=str(source) if source else None,
    )


def parse_preset(path: Path, strict: bool = True) -> Preset:
    """
    Parse a preset file.

    Args:
        path: Preset file path
        strict: Raise on malformed lines instead of skipping them

    Returns:
        Parsed Preset

    Raises:
        PresetNotFoundError: File does not exist
        PresetParseError: Malformed line in strict mode
        InvalidPresetError: No non-empty `name` key
    """
    path = Path(path)
    if not path.is_file():
        raise PresetNotFoundError(path)

    with open(path, "r", encoding="utf-8", errors="replace") as f:
        text = f.read()

    return parse_preset_text(text, source=path, strict=strict)
