"""The `lang` package contains everything around the core: errors and their display, the string lexer, the symbolic
builder, sessions and the interactive shell.
"""
