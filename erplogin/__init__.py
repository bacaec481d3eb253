"""Login client for JSON-RPC business-application servers."""

__version__ = "0.1.0"
