"""
da_register_extraction reads development applications from council register
PDFs whose page layout, not tagged structure, marks where each record and
field begins.

The layout core is geometry -> anchors -> segmenter -> fields, with addresses
reconstructing merged address slots against the reference vocabularies.
"""

__all__ = [
    "geometry",
    "anchors",
    "segmenter",
    "fields",
    "addresses",
    "reference",
    "schema",
    "parser",
    "preprocess",
    "orchestrator",
    "config",
]
