"""
Writing diagrams as delimited text, one line per window-width level.
"""

import io
import sys
from pathlib import Path
from typing import TextIO, Union

import numpy as np

from ..exceptions import OutputError

Target = Union[None, str, Path, TextIO]

# Six significant digits
DEFAULT_FORMAT = '%g'


def format_diagram(diagram: np.ndarray,
                   separator: str = '\t',
                   fmt: str = DEFAULT_FORMAT) -> str:
    """Render a diagram as text, cells separated by ``separator``."""
    buffer = io.StringIO()
    np.savetxt(buffer, np.atleast_2d(diagram), delimiter=separator, fmt=fmt)
    return buffer.getvalue()


def write_diagram(diagram: np.ndarray,
                  target: Target = None,
                  separator: str = '\t',
                  fmt: str = DEFAULT_FORMAT) -> None:
    """
    Write a diagram to a file path or a text stream.

    Parameters
    ----------
    diagram : np.ndarray, shape (W, K)
        Correlation or p-value diagram
    target : str, Path, text stream or None
        Destination; None writes to standard output
    separator : str, default TAB
        Cell separator
    fmt : str, default '%g'
        printf-style cell format

    Raises
    ------
    OutputError
        If the destination cannot be written.
    """
    text = format_diagram(diagram, separator, fmt)

    if target is None:
        target = sys.stdout

    if isinstance(target, (str, Path)):
        try:
            with open(target, 'w', encoding='utf8') as fh:
                fh.write(text)
        except OSError as exc:
            raise OutputError(
                f"i/o error when writing data on file '{target}'. "
                "Please check permissions.") from exc
        return

    try:
        target.write(text)
        target.flush()
    except OSError as exc:
        raise OutputError(f"i/o error when writing diagram: {exc}") from exc
