"""Cross-cutting helpers (logging configuration)."""
