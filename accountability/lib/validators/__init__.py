"""
Base Validator class.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any


class Validator(ABC):
    """Base class for upstream record validators."""

    @abstractmethod
    def validate(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Validate one raw upstream record and return a list of issues.

        Args:
            data: The record to validate (e.g., one trade or key vote dict)

        Returns:
            List of issues, where each issue is a dict with:
            - code: Error code
            - message: Description
            - severity: 'error' or 'warning'
            - field: Field name (optional)
        """
        pass


def has_errors(issues: List[Dict[str, Any]]) -> bool:
    """True if any issue has 'error' severity."""
    return any(issue.get('severity') == 'error' for issue in issues)
