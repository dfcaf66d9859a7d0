"""JSON reporter: the full check result as one JSON document.

Rule names are always included; ``verbose`` has no effect here.
"""

import json
from typing import Optional, TextIO

from stylectl.core.results import CheckResult
from stylectl.reporters.base import output_stream


def render(
    result: CheckResult,
    *,
    verbose: bool = False,
    colors: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    output_stream(stream).write(json.dumps(result.to_json(), indent=2) + "\n")
