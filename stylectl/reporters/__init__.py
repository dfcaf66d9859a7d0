"""
Reporter selection.

A reporter reference is one of:
- a predefined reporter name (``console``, ``text``, ``checkstyle``, ...)
- a path relative to the current working directory
- an absolute path

and resolves to the ``render`` callable of a Python module. Predefined
reporters are themselves plain modules in this package, so a name and
the path of its module select the same renderer.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.exceptions import ReporterNotFound
from ..core.logging import get_logger
from ..utils.loader import ModuleLoadError, load_module_from_path
from .base import Renderer

logger = get_logger(__name__)

_PACKAGE_DIR = Path(__file__).parent

# Registry of predefined reporters: name -> module file
REPORTERS: dict[str, Path] = {
    name: _PACKAGE_DIR / f"{name}.py"
    for name in (
        "console",
        "text",
        "inline",
        "unix",
        "summary",
        "json",
        "checkstyle",
        "junit",
    )
}


@dataclass(frozen=True)
class ReporterHandle:
    """A resolved reporter.

    Attributes:
        name: Reporter name, or the reference it was loaded from
        path: Resolved module file
        render: ``render(result, *, verbose, colors, stream)`` callable
    """
    name: str
    path: Path
    render: Renderer


def default_reporter_name(colors: bool) -> str:
    """Reporter used when none is requested."""
    return "console" if colors else "text"


def list_reporters() -> list[str]:
    """List predefined reporter names."""
    return list(REPORTERS.keys())


def _load(name: str, path: Path) -> Optional[ReporterHandle]:
    try:
        module = load_module_from_path(path, "reporter")
    except ModuleLoadError as e:
        logger.debug(f"Cannot load reporter {name}: {e}")
        return None
    render = getattr(module, "render", None)
    if not callable(render):
        logger.debug(f"Reporter {name} does not export a render() callable")
        return None
    return ReporterHandle(name=name, path=path.resolve(), render=render)


def resolve_reporter(
    reference: Optional[str],
    colors: bool = True,
    cwd: Optional[Path] = None,
) -> ReporterHandle:
    """Resolve a reporter reference to a renderer.

    Tries, in order: a predefined name, a path relative to ``cwd``, an
    absolute path. With no reference the default for ``colors`` is used.

    Raises:
        ReporterNotFound: If no interpretation yields a module exporting
            a callable ``render``
    """
    if not reference:
        reference = default_reporter_name(colors)

    if reference in REPORTERS:
        handle = _load(reference, REPORTERS[reference])
        if handle is not None:
            logger.info(f"Using reporter: {reference}")
            return handle

    candidate = Path(reference)
    if not candidate.is_absolute():
        candidate = (Path.cwd() if cwd is None else Path(cwd)) / candidate

    if candidate.is_file():
        handle = _load(reference, candidate)
        if handle is not None:
            logger.info(f"Using reporter from {candidate}")
            return handle

    raise ReporterNotFound(reference)
