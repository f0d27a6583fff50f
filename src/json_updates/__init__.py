"""json-updates — write gateway for batched, insert-if-absent MongoDB writes."""

__version__ = "0.1.0"
