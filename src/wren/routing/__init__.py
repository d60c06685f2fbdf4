"""Routing — path patterns, the live route catalog, and URL helpers.

Route definitions are parsed once into segment lists when they enter
the catalog and matched in catalog order on every navigation.
"""
