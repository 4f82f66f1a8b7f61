"""Built-in configuration defaults."""

_DEFAULTS = {
    "pot_host": "localhost",
    "pot_port": "2222",
}


def get_value(name: str) -> str:
    """Return the configured value for ``name``, or an empty string if unknown."""
    return _DEFAULTS.get(name, "")