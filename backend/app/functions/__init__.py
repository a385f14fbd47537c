"""
Stateless AI proxy functions, deployed as their own ASGI app (app.functions.main:app).
"""
