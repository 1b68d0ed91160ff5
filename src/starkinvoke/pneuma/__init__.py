"""
Pneuma - On-chain interaction layer for starkinvoke.

Provides the JSON-RPC client, call encoding, account binding and
INVOKE v3 transaction submission for Starknet.

Uses httpx + poseidon-py + eth-hash instead of a full Starknet SDK.
"""
