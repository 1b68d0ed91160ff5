"""
Theurgy - Command implementations for starkinvoke.

Each module corresponds to a top-level CLI command:
- invoke: Sign and broadcast one contract call
"""
