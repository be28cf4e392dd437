"""Bundled project templates.

Each subdirectory is one template, copied verbatim into a new project and
then substituted. Files use ``{{PROJECT_NAME}}``-style tokens.
"""
