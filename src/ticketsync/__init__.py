"""ticketsync - Keeps platform tickets in sync with ConnectWise Manage."""

__version__ = "0.1.0"
