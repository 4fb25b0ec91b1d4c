"""A small command shell: lexer, parser, word expansion and an executor for pipelines, lists and subshells."""

__version__ = "0.1.0"