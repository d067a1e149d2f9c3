"""
Engines are the things that do the actual work over the records:
compare them, calculate the changesets, and apply the changesets back.

All of them are synchronous, stateless between calls, and do no I/O.
"""
