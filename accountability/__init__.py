"""
Congress Accountability Scoring

Turns public records about elected officials into derived accountability
artifacts.

Architecture:
- Category Resolver: topic text -> canonical subject categories
- Beneficiary Classifier: legislative text -> who is helped or harmed
- Position Alignment: stated positions vs. roll-call votes
- Trade Risk Scorer: disclosed stock trades -> risk flags and summary
- Grade Aggregator: all of the above -> one letter grade per official

Components:
- lib/scoring/: pure scoring engine (no I/O)
- lib/validators/: upstream record checks
- functions/: AWS Lambda batch handlers
- scripts/: local batch runners
"""

__version__ = "2.0.0"
__license__ = "MIT"
