"""RhythmFlow music discovery server: accounts, sessions and saved playlists"""

__version__ = "1.0.0"
