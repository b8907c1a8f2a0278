"""Update repository registration layer.

This module binds an update source to the package resolver and
exposes the packages it contributes to the update pipeline.
"""
