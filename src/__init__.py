"""folio: content core for a portfolio site with an admin-managed blog."""

__version__ = "0.3.0"
