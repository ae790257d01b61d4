"""Cross-package schemas and security helpers."""
