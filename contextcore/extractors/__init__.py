"""One module per semantic category.

Each module holds its strategy table, validator and dedup key as data and
exposes ``CATEGORY`` plus an ``extract_<name>(text)`` entry point.
"""
