"""Prompt generation: turns a brand configuration into test prompts for LLM platforms."""
