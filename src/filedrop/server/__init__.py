"""Request pipeline and server lifecycle."""
