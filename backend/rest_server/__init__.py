"""User credential management in front of an etcd v2 key-value store."""

__version__ = "0.1.0"
