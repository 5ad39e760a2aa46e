"""Core: configuration, domain, contracts and the startup sequence.

The core never prints; UI layers plug in through hooks.
"""
