"""Test helpers for the BCS test suite.

- corpus: builders for on-disk rule corpora
"""
