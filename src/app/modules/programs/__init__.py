"""
Programs module - degree programs offered by universities.

API Endpoints:
- GET /programs - List (level, universityId, q filters)
- GET /programs/search - Search by field, degree level, country and fee range
- GET /programs/{id} - Program with its university
- GET /programs/{id}/requirements - Admission requirements
"""
