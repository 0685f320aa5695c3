"""Packaged SQL migration scripts, one directory per dialect.

File names sort in apply order (``NNNN_description.sql``).
"""
