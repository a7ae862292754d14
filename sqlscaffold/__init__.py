"""sqlscaffold -- scaffold a web service project from database tables.

The generator instantiates a bundled skeleton project: it selects the files a
service needs, removes variant-specific code, splices in code derived from
each table, and renames everything to the caller's module and service.
"""

__version__ = "0.1.0"
