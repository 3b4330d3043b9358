"""Idempotency app package.

Durable ledger of responses produced for client-supplied idempotency keys.
A key is written once; concurrent first writers are settled by the primary
key constraint and the loser replays the winner's stored response.
"""
