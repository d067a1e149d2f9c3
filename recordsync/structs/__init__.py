"""
Plain data structures and static tables of the records and their changesets.

Nothing here does any comparison or mutation logic on its own:
see `recordsync.engines` for that.
"""
