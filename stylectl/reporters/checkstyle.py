"""Checkstyle XML reporter, understood by most CI servers.

The rule name is always carried in the ``source`` attribute; verbose
mode also prefixes it to the message.
"""

import xml.etree.ElementTree as ET
from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import format_message, output_stream


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    root = ET.Element("checkstyle", version="4.3")
    for file_result in result.files:
        node = ET.SubElement(root, "file", name=file_result.path)
        if file_result.failure is not None:
            ET.SubElement(
                node, "error",
                line="1", column="0", severity="error",
                message=file_result.failure, source="stylectl.parseError",
            )
        for violation in file_result.violations:
            ET.SubElement(
                node, "error",
                line=str(violation.line),
                column=str(violation.column),
                severity="error",
                message=format_message(violation, verbose),
                source=f"stylectl.{violation.rule}",
            )

    out = output_stream(stream)
    out.write('<?xml version="1.0" encoding="utf-8"?>\n')
    out.write(ET.tostring(root, encoding="unicode") + "\n")
