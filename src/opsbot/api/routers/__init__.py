"""HTTP routers for the webhook application."""
