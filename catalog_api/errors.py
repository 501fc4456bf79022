"""
Store error taxonomy
"""


class StoreError(Exception):
    """A statement against the relational store failed"""


class StoreUnavailableError(StoreError):
    """The store could not be reached or no pooled connection became free"""
