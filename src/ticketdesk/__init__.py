"""TicketDesk - ticket tracking on top of a hosted Supabase project."""

__version__ = "0.1.0"
