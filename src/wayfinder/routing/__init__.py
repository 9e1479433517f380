"""Routing — the route tree and URL templates.

Routes are registered during setup; each one's full template is compiled
from its ancestor chain at registration and never changes afterwards.
"""
