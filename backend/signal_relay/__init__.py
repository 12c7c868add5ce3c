"""
TradingView → Discord signal relay.

Receives TradingView alert webhooks, authenticates them with a shared secret
and posts a formatted embed to a Discord channel.
"""
