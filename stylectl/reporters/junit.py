"""JUnit XML reporter: one test case per checked file."""

import xml.etree.ElementTree as ET
from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import format_message, output_stream, plural


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    failing = [f for f in result.files if not f.is_clean]
    suite = ET.Element(
        "testsuite",
        name="stylectl",
        tests=str(len(result.files)),
        failures=str(len(failing)),
    )
    for file_result in result.files:
        case = ET.SubElement(suite, "testcase", name=file_result.path)
        if file_result.is_clean:
            continue
        if file_result.failure is not None:
            failure = ET.SubElement(case, "failure", message=file_result.failure)
            failure.text = file_result.failure
            continue
        failure = ET.SubElement(
            case, "failure",
            message=f"{plural(len(file_result.violations) + file_result.omitted, 'code style error')} found",
        )
        failure.text = "\n".join(
            f"line {v.line}, col {v.column}, {format_message(v, verbose)}"
            for v in file_result.violations
        )

    out = output_stream(stream)
    out.write('<?xml version="1.0" encoding="utf-8"?>\n')
    out.write(ET.tostring(suite, encoding="unicode") + "\n")
