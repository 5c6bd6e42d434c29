"""
Chat Module

Study-abroad assistant conversations. Replies come from a keyword responder;
the depth of the answer follows the user's plan.
"""
