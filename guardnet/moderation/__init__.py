"""Decision pipeline: block-list matching, verdict normalization and statistics.

This package provides:
- Schedule evaluation for time-windowed block rules
- Local block-list matching that short-circuits remote classification
- Normalization of free-form classifier output into a fixed taxonomy
- Folding of verdicts into running statistics
"""
