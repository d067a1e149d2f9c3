"""
Every synchronization needs a log of what was changed and when.
"""
