"""CLI command handlers."""

from .render import render_template, render_text

__all__ = ['render_template', 'render_text']
