"""Text interface: REPL, command registry, rendering and user config."""
