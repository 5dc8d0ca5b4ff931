"""
Visitors App

Global page-visit counter for the portfolio site.
"""
