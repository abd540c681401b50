"""
Battle arena: head-to-head comparison tournaments with cross-session leaderboards.
"""
