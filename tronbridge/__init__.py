"""
tronbridge - Ethereum JSON-RPC compatibility gateway for TRON-style nodes.
"""

__version__ = "0.1.0"
__logo__ = "⇄"
