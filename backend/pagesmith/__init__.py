"""Translate web page edit requests into model prompts and model replies into page files."""
