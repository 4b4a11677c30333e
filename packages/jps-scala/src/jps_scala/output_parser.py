"""Mapping of compiler process output to diagnostics.

Default mode forwards every output line as a WARNING. Strict mode
recognizes two diagnostic-line forms and keeps everything else as INFO:

    <file>:<line>:<severity>:<message>
    [<severity>] <file>:<line>: <message>
"""

from __future__ import annotations

import re
from pathlib import Path

from jps_scala.models import BUILDER_NAME, Diagnostic, Severity

_COLON_FORM = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):\s*(?P<severity>info|warning|warn|error)\s*:\s?(?P<message>.*)$",
    re.IGNORECASE,
)

_BRACKET_FORM = re.compile(
    r"^\[(?P<severity>info|warning|warn|error)\]\s+(?P<file>.+?):(?P<line>\d+):\s?(?P<message>.*)$",
    re.IGNORECASE,
)

_SEVERITIES = {
    "info": Severity.INFO,
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
}


class OutputParser:
    """Converts raw output lines into diagnostics.

    Attributes:
        strict: Whether to classify lines with the diagnostic-line grammar
        tag: Tag attached to each diagnostic

    Example:
        >>> OutputParser(strict=True).parse("A.scala:3:error:not found: value x")
        Diagnostic(tag='scala', severity=<Severity.ERROR: 'error'>, ...)
    """

    def __init__(self, strict: bool = False, tag: str = BUILDER_NAME) -> None:
        self.strict = strict
        self.tag = tag

    def parse(self, line: str) -> Diagnostic | None:
        """Convert one output line.

        Args:
            line: Raw line, possibly ending in a newline.

        Returns:
            Diagnostic, or None for blank lines.
        """
        text = line.rstrip("\r\n")
        if not text.strip():
            return None

        if not self.strict:
            return Diagnostic(tag=self.tag, severity=Severity.WARNING, text=text)

        match = _COLON_FORM.match(text) or _BRACKET_FORM.match(text)
        if match is None:
            return Diagnostic(tag=self.tag, severity=Severity.INFO, text=text)

        return Diagnostic(
            tag=self.tag,
            severity=_SEVERITIES[match.group("severity").lower()],
            text=match.group("message").strip(),
            source_path=Path(match.group("file").strip()),
            line=int(match.group("line")) or None,
        )
