"""BCS CLI commands, one module per :class:`bcs.cli._dispatcher.Command`."""
