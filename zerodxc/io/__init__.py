"""
Reading sequence tables and writing diagrams.
"""

from .loading import (
    SequenceStore,
    load_table,
    load_sequences,
    store_from_text,
)

from .export import (
    format_diagram,
    write_diagram,
)

__all__ = [
    'SequenceStore',
    'load_table',
    'load_sequences',
    'store_from_text',
    'format_diagram',
    'write_diagram',
]
