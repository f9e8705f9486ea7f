"""AccountHub: user accounts, token sessions and a presence WebSocket channel."""
