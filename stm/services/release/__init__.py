"""Tagging, release notes and GitHub publication."""
