"""
Applications Module

Students apply to university programs. Submission is limited by the plan in
force; admins move applications through their review lifecycle.
"""
