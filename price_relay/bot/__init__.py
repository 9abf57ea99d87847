"""Telegram bot implementation package.

Contains all Telegram specific functionality including the relay handlers,
listing rendering, admin notifications and localized message templates.
"""
