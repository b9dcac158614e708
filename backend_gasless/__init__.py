"""
Backend Gasless: fee-sponsored Solana transfer construction.

Builds native SOL and SPL token transfers paid for by a sponsoring fee payer,
partially signs them, and hands them to the client to add the sender's
signature and broadcast.
"""

__version__ = "0.1.0"
