"""Main entry point when executing memoproxy as a package.

This allows running the maintenance CLI using python -m memoproxy.
"""

from memoproxy.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
