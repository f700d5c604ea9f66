"""
Common utilities: logging setup, password hashing and bearer tokens.

Import from the submodules directly (``kanban.utils.auth``,
``kanban.utils.logger``); ``kanban.config`` depends on the logger, and the
token module depends on ``kanban.config``.
"""
