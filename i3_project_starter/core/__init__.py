"""Core operations: config files, layout resolution, i3 IPC and project start."""
