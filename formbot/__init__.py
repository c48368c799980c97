"""Learned answers for job-application form questions."""

__version__ = "0.3.0"
