"""Core sync components: Plex and Apple Music clients, rating scales, sync."""
