"""Terminal rendering: ANSI helpers, help pages, and frame composition.

Submodules are imported directly (``render.ansi``, ``render.frame``) so the
row model can use the ANSI helpers without pulling in panel code.
"""
