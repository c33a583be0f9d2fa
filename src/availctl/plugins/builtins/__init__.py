"""Built-in plugins shipped with availctl."""
