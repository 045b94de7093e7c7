"""Building blocks of a small command shell: tokenizer, syntax tree nodes, redirections and an executor for commands and pipelines."""

__version__ = "0.1.0"