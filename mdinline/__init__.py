"""Markdown editor that copies documents as self-contained, inline-styled rich text."""
