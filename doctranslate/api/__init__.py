"""
Web API: Flask blueprints, background jobs and WebSocket updates
"""
