"""Top-level package for NewsBlogGen.

Turns topic keywords into a formatted news blog draft through a generative
model, then keeps that single document consistent while the user refines and
translates it in a chat-style editor.
"""

__all__ = []
