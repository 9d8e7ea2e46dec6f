"""Prompt building, summaries, and report output."""

from .prompt import build_prompt
from .summary import clamp_text, extract_explanation, fallback_summary

__all__ = ["build_prompt", "clamp_text", "extract_explanation", "fallback_summary"]
