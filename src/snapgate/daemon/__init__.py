"""snapd daemon access: socket transport, endpoint client, change tracking."""
