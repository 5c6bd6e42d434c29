"""
Universities module - university catalog and search.

API Endpoints:
- GET /universities/search - Filtered search (free tier capped at 5 per page)
- GET /universities/filters/countries - Countries for the filter UI
- GET /universities/{id} - University with its programs
"""
