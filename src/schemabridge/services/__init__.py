"""Cross-cutting services shared by the converter, loader, and CLI."""
