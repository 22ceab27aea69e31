"""
HTTP layer for the RhythmFlow server.

The application is built by rhythmflow_web.main.create_app(); there is no
module-level app so importing this package never requires TOKEN_SECRET.
"""
