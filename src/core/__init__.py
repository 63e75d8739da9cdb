"""Core domain package for octogram.

Core contains event extraction, suppression and formatting logic without any
HTTP or Telegram-specific code, keeping the business logic portable.
"""
