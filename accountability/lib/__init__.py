"""
Shared libraries for accountability scoring.

- scoring: the classification and grading engine
- validators: checks for upstream vote and trade records
- config / s3_utils: settings and storage helpers for batch runners
"""
