"""
Execution client sync conformance suite.

Verifies that an Ethereum execution client can sync its canonical chain from
another client, for any pair of client implementations.
"""

__version__ = "0.1.0"
