"""Domain layer for Observable Entropy.

Pure value types shared by every other layer: tagged errors, the
Result wrapper, contribution receipts and resolution selectors.
Nothing in this package performs I/O.
"""
