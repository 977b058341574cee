"""HTTP transport for Observable Entropy."""
