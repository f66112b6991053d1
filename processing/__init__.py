# processing/__init__.py
"""Deterministic comic-script processing: segmentation, the extraction cascade,
block classification and canonical assembly."""
