"""
Utilities not related to the records and changesets directly.
"""
