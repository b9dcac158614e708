"""
Gasless relay: builds Solana transfers (SOL or SPL) that a sponsoring fee
payer has partially signed, for the sender to complete client-side.

Pipeline: validation -> instructions -> assembler, orchestrated by service.
Network access is confined to ledger.SolanaLedger.
"""
