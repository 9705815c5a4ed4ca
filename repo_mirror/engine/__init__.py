"""
Engine: reconciliation decisions and the sequential sync loop.
"""
