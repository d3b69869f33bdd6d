"""Service layer. Every function takes the session and caller context explicitly."""
