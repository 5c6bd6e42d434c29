"""
Courses Module

Preparation courses (free and paid) and student enrollments.
"""
