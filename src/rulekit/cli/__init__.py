"""Command-line helpers for rulekit."""
