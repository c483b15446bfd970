"""The `pure` package contains the props core: token classification, parsing, evaluation and curried invocation. It
knows nothing about source text, sessions or printing.
"""
