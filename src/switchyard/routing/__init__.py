"""Routing — ordered route table and first-match path matching.

Routes are appended during setup and the table is frozen once the
router starts serving requests.
"""
