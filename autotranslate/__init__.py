"""
Autotranslate - Automatic translation of JSON string catalogs

Finds missing and changed strings in every target language, translates
them with an online service while protecting interpolations, and writes
the merged catalogs back.
"""

__version__ = "0.1.0"
