"""
AppNeta Slack Relay service.

Receives AppNeta event-integration webhooks, suppresses duplicates and
oscillating path changes inside a configurable persistence time, and
posts the remaining events to Slack.
"""
