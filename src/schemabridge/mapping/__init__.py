"""Inference rules that turn legacy class schemas into mapping descriptors."""
