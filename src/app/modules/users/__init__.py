"""
Users module - accounts, profiles and uploaded documents.

API Endpoints:
- GET /users/profile - Current user's profile
- PUT /users/profile - Partial profile update
- GET /users/documents - List uploaded documents
- POST /users/documents - Upload a document (multipart)
- DELETE /users/documents/{id} - Remove a document
"""
