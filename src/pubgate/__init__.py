"""pubgate — content validation and publishing gate for an MDX blog."""

__version__ = "0.4.0"
