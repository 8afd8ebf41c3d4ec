"""Use cases: access decision, then repository call, then audit entry.

Every operation takes the repository and the authenticated caller
explicitly and accepts either a schema instance or a plain mapping as its
payload.
"""
