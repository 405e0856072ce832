"""
Block tree for OpenLiteSpeed-style config files.

vhconf.conf is plain text made of directive lines and brace-delimited
blocks:

    docRoot                   $VH_ROOT/html/

    phpIniOverride  {
      php_value memory_limit 512M
      php_value max_execution_time 300
    }

ConfigDocument keeps every physical line as-is and indexes the
structure on top of it: which lines open and close blocks, and which
lines are directives. Edits rewrite or insert single lines; render()
joins the lines back, so anything that was not edited comes out
byte-for-byte identical, line endings included.

The structure is re-indexed after each edit. Documents are small and
edits are few, so there is no incremental bookkeeping.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


_OPEN_RE = re.compile(r"^\s*(?P<marker>[^\s{}#]+)(?:\s+[^{}#]*?)?\s*\{\s*$")
_CLOSE_RE = re.compile(r"^\s*\}\s*$")

DEFAULT_INDENT = "  "


def split_eol(line: str) -> Tuple[str, str]:
    """Split a physical line into (content, line ending)."""
    if line.endswith("\r\n"):
        return line[:-2], "\r\n"
    if line.endswith(("\n", "\r")):
        return line[:-1], line[-1]
    return line, ""


def detect_eol(lines: List[str]) -> str:
    """Line ending used by the document ("\\n" if none found)."""
    for line in lines:
        _, eol = split_eol(line)
        if eol:
            return eol
    return "\n"


@dataclass
class Directive:
    """
    One `[keyword] key value` line.

    Every part of the line except the value is kept verbatim so that
    changing the value leaves indentation, spacing, and any trailing
    whitespace untouched.
    """
    index: int
    lead: str
    keyword: str  # keyword plus its trailing separator, or ""
    key: str
    sep: str
    value: str
    tail: str
    eol: str

    def render(self, value: Optional[str] = None) -> str:
        if value is None:
            value = self.value
        return f"{self.lead}{self.keyword}{self.key}{self.sep}{value}{self.tail}{self.eol}"


@dataclass
class ConfigBlock:
    """
    A `<marker> { ... }` region.

    end is the index of the closing brace line, or None when the block
    is never closed.
    """
    marker: str
    start: int
    end: Optional[int] = None
    directives: List[Directive] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return self.end is not None


class ConfigDocument:
    """
    Parsed config file: raw lines plus an index of blocks and directives.

    Args:
        lines: Physical lines, each including its line ending
        keyword: Directive keyword (e.g. "php_value"); None treats every
            `key value` line as a directive
    """

    def __init__(self, lines: List[str], keyword: Optional[str] = None):
        self.lines = list(lines)
        self.keyword = keyword
        if keyword:
            pattern = (
                r"^(?P<lead>\s*)(?P<keyword>" + re.escape(keyword) + r"\s+)"
                r"(?P<key>[^\s{}#]+)(?P<sep>\s+)(?P<value>\S.*?)(?P<tail>\s*)$"
            )
        else:
            pattern = (
                r"^(?P<lead>\s*)(?P<keyword>)"
                r"(?P<key>[^\s{}#]+)(?P<sep>\s+)(?P<value>\S.*?)(?P<tail>\s*)$"
            )
        self._directive_re = re.compile(pattern)
        self.blocks: List[ConfigBlock] = []
        self.directives: List[Directive] = []
        self._index()

    @classmethod
    def parse(cls, text: str, keyword: Optional[str] = None) -> "ConfigDocument":
        return cls(text.splitlines(keepends=True), keyword=keyword)

    @property
    def eol(self) -> str:
        return detect_eol(self.lines)

    def render(self) -> str:
        return "".join(self.lines)

    # -------------------------------------------------------------------------
    # Indexing
    # -------------------------------------------------------------------------

    def _index(self) -> None:
        self.blocks = []
        self.directives = []
        stack: List[ConfigBlock] = []

        for i, raw in enumerate(self.lines):
            content, eol = split_eol(raw)

            match = _OPEN_RE.match(content)
            if match:
                block = ConfigBlock(marker=match.group("marker"), start=i)
                self.blocks.append(block)
                stack.append(block)
                continue

            if _CLOSE_RE.match(content):
                if stack:
                    stack.pop().end = i
                else:
                    logger.debug("Unbalanced closing brace at line %d", i + 1)
                continue

            match = self._directive_re.match(content)
            if match:
                directive = Directive(index=i, eol=eol, **match.groupdict())
                self.directives.append(directive)
                if stack:
                    stack[-1].directives.append(directive)

        for block in stack:
            logger.warning("Block '%s' opened at line %d is never closed", block.marker, block.start + 1)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_block(self, marker: str) -> Optional[ConfigBlock]:
        """First block with this marker (later duplicates are ignored)."""
        for block in self.blocks:
            if block.marker == marker:
                return block
        return None

    def find_directives(self, key: str) -> List[Directive]:
        """All directives for key, anywhere in the file."""
        return [d for d in self.directives if d.key == key]

    def get_value(self, key: str) -> Optional[str]:
        """Value of the first directive for key, anywhere in the file."""
        for directive in self.directives:
            if directive.key == key:
                return directive.value
        return None

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def _directive_line(self, indent: str, key: str, value: str) -> str:
        keyword = f"{self.keyword} " if self.keyword else ""
        return f"{indent}{keyword}{key} {value}{self.eol}"

    def _terminate_last_line(self, before: int) -> None:
        # A line inserted at `before` needs the previous line to end cleanly
        if before > 0 and not split_eol(self.lines[before - 1])[1]:
            self.lines[before - 1] += self.eol

    def set_value(self, directive: Directive, value: str) -> None:
        """Replace the value token of one directive line."""
        self.lines[directive.index] = directive.render(value)
        self._index()

    def insert_directive(self, block: ConfigBlock, key: str, value: str) -> None:
        """Add a directive as the last line inside a block."""
        indent = block.directives[0].lead if block.directives else DEFAULT_INDENT
        at = block.end if block.end is not None else len(self.lines)
        self._terminate_last_line(at)
        self.lines.insert(at, self._directive_line(indent, key, value))
        self._index()

    def append_block(self, marker: str, key: str, value: str) -> None:
        """Append a new block holding a single directive at end of file."""
        eol = self.eol
        self._terminate_last_line(len(self.lines))
        if self.lines:
            self.lines.append(eol)
        self.lines.extend([
            f"{marker}  {{{eol}",
            self._directive_line(DEFAULT_INDENT, key, value),
            f"}}{eol}",
        ])
        self._index()

    def remove_directives(self, key: str) -> int:
        """Delete every directive line for key. Returns lines removed."""
        doomed = {d.index for d in self.find_directives(key)}
        if doomed:
            self.lines = [line for i, line in enumerate(self.lines) if i not in doomed]
            self._index()
        return len(doomed)
