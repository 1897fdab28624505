"""Routing — ordered route table with regex-compiled templates.

Routes are registered during setup and scanned in registration order
for every request.
"""
