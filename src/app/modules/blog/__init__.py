"""
Blog Module

Public articles with categories and tags, an admin editor, scheduled
publishing and an XML sitemap.
"""
