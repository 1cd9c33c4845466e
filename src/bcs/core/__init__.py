"""BCS core library package."""
