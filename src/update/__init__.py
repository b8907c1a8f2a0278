"""Update image pipeline.

This module turns repository packages into squashed filesystem images
and splices them into the running installation system.
"""
