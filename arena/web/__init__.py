"""
Web interface module for the battle arena.

Provides a FastAPI-based server for:
- Creating and opening/closing arenas
- Playing battle sessions one match at a time, with undo
- Reading stored results and the aggregated leaderboard
"""
