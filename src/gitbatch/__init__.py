"""Batch git branch deletion tool.

Features:
- List local and remote branches, one entry per branch name
- Show the latest commit of each branch
- Interactive selection with explicit confirmation
- Parallel deletion with per-branch failure reporting
"""

__version__ = "0.1.0"
