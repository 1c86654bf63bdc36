"""loopfetch terminal application."""
