"""Provide prompt rendering for the AI-backed script parser.

Templates live alongside these modules as `prompts/<parser_name>/*.j2` with a
fixed `prompts/<parser_name>/system.md`.
"""
