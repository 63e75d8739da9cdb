"""Adapters that connect the core to GitHub webhooks and Telegram."""
