"""
Source: list the repositories to mirror from the source host.
"""
