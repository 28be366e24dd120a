"""Adapters connecting the pipeline to parsers, renderers and Markdown."""
