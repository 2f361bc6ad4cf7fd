"""World Explorer core: country feature resolution and resilient data aggregation."""

__version__ = "0.1.0"
