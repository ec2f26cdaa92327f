"""
Systems: free functions that mutate roles and scalar state in place.

Each module groups the rules of one subsystem; events call into them and
player commands reuse them for their state changes.
"""
