"""Reviewkeeper - pull request reviewer assignment service.

This package assigns code reviewers to pull requests from the author's team,
keeps those assignments valid as teammates are deactivated or swapped, and
tracks the pull request lifecycle from OPEN to MERGED.
"""

__version__ = "0.1.0"
