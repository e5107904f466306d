"""Gradio user interface for StyleSwap.

The UI is a thin presentation layer: it reads workflow state and forwards
user events to the workflow in :mod:`styleswap.core`.
"""
