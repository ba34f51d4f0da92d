"""
Loading of column-wise sequence tables.

Input is a headerless rectangular table of numbers, one sequence per
column, separated by TAB, space or comma, read from a file or a stream.
"""

import io
import logging
from pathlib import Path
from typing import Iterator, List, Sequence, TextIO, Union

import numpy as np
import pandas as pd

from ..exceptions import ConfigurationError, InputConsistencyError

logger = logging.getLogger(__name__)

Source = Union[str, Path, TextIO]


class SequenceStore:
    """
    Read-only holder of equal-length sequences, indexed by column.

    Parameters
    ----------
    sequences : sequence of array-like
        One entry per column; all must have the same length
    """

    def __init__(self, sequences: Sequence[Sequence[float]]):
        arrays = [np.array(s, dtype=float) for s in sequences]

        if len(arrays) == 0:
            raise InputConsistencyError("no sequence was loaded")
        if any(a.ndim != 1 for a in arrays):
            raise InputConsistencyError("sequences must be one-dimensional")

        lengths = {a.size for a in arrays}
        if len(lengths) != 1:
            raise InputConsistencyError(
                f"inconsistent sequence sizes found: {sorted(lengths)}")

        for a in arrays:
            a.setflags(write=False)
        self._sequences: List[np.ndarray] = arrays

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> 'SequenceStore':
        """One sequence per dataframe column, in column order."""
        return cls([df[col].to_numpy(dtype=float) for col in df.columns])

    def __len__(self) -> int:
        return len(self._sequences)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._sequences[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._sequences)

    @property
    def length(self) -> int:
        """Number of samples per sequence."""
        return self._sequences[0].size

    def column(self, number: int) -> np.ndarray:
        """
        Sequence at 1-based column ``number``.

        Raises
        ------
        ConfigurationError
            If ``number`` does not name a loaded column.
        """
        if number < 1:
            raise ConfigurationError(f"column numbers start at 1, got {number}")
        if number > len(self):
            raise ConfigurationError(
                f"requested column {number} is larger than the number of "
                f"loaded sequences ({len(self)})")
        return self._sequences[number - 1]


def load_table(source: Source, separator: str = '\t') -> pd.DataFrame:
    """
    Read a headerless numeric table.

    Parameters
    ----------
    source : str, Path or text stream
        File path, or an open stream such as ``sys.stdin``
    separator : str, default TAB
        Single separator character (TAB, space or comma)

    Returns
    -------
    pd.DataFrame
        Float dataframe with integer column labels 0..n-1

    Raises
    ------
    InputConsistencyError
        Unreadable file, ragged rows or non-numeric cells.
    """
    if isinstance(source, (str, Path)):
        label = str(source)
    else:
        label = getattr(source, 'name', '<stream>')

    try:
        df = pd.read_csv(source, sep=separator, header=None, skip_blank_lines=True)
    except (OSError, UnicodeDecodeError) as exc:
        raise InputConsistencyError(f"cannot read the selected file '{label}'") from exc
    except pd.errors.EmptyDataError as exc:
        raise InputConsistencyError(f"no data found in '{label}'") from exc
    except pd.errors.ParserError as exc:
        raise InputConsistencyError(
            f"inconsistent sequence sizes found in '{label}': {exc}") from exc

    # Trailing separators produce empty columns
    df = df.dropna(axis=1, how='all')

    try:
        df = df.apply(pd.to_numeric)
    except (ValueError, TypeError) as exc:
        raise InputConsistencyError(f"non-numeric value in '{label}': {exc}") from exc

    if df.isna().any().any():
        raise InputConsistencyError(
            f"inconsistent sequence sizes found in '{label}': missing values")

    df.columns = range(df.shape[1])
    return df.astype(float)


def load_sequences(source: Source,
                   separator: str = '\t',
                   min_sequences: int = 2) -> SequenceStore:
    """
    Load every column of a table into a :class:`SequenceStore`.

    Parameters
    ----------
    source : str, Path or text stream
        File path or open stream
    separator : str, default TAB
        Column separator
    min_sequences : int, default 2
        Fewer columns than this is an input error

    Returns
    -------
    SequenceStore
    """
    df = load_table(source, separator)

    if df.shape[1] < min_sequences:
        raise InputConsistencyError(
            f"only {df.shape[1]} sequence(s) detected, at least {min_sequences} required")

    store = SequenceStore.from_dataframe(df)
    logger.debug("loaded %d sequences of %d samples", len(store), store.length)
    return store


def store_from_text(text: str, separator: str = '\t') -> SequenceStore:
    """Build a store from table text; handy for tests and notebooks."""
    return load_sequences(io.StringIO(text), separator)
