"""Price Relay Bot Application Package.

A Telegram bot that relays product listings from a source group to a target
group, rewriting the USD prices found in each listing into PEN sale prices
with the shop's markup formula.

The application follows a modular architecture with separate concerns for:
- Bot handlers and message relaying
- Price and size extraction from free-form listing text
- Sale price calculation (markup, shipping, currency conversion)
"""
