"""
repo-mirror: mirror GitHub repositories to GitLab, Codeberg or Bitbucket.
"""

__version__ = "1.0.0"
