"""
Sample export for offline analysis of a finished measurement window.
"""

from .sample_export import SAMPLE_SCHEMA, export_samples, samples_to_dataframe

__all__ = [
    "SAMPLE_SCHEMA",
    "export_samples",
    "samples_to_dataframe",
]
