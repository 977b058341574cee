"""
Observable Entropy - public entropy snapshots and contribution pool

Serves the signed entropy records published by the observable-entropy
repository, verifies them against the publisher's Ed25519 key, and
accepts third-party entropy contributions into a short-lived pool that
is folded into future records.

Integrity Rules:
- A record is trusted only when its signature AND its iterated hash match
- Every contribution is accompanied by an unpredictable shadow entry
- Contributions expire on their own; nothing is ever deleted by hand
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
