"""
Form signer.

Loads a remote PDF form, strips denylisted button widgets, turns a freehand
signature into a vector ink annotation, lets annotations be dragged on the
page, and saves or prints the result.
"""
