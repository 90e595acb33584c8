"""
Sync suite CLI entry point.

Usage::

    python -m hive_sync run --source http://10.0.0.2:8545 --sink http://10.0.0.3:8545
    python -m hive_sync check-fixtures --fixtures ./chain
"""

from hive_sync.cli import main

if __name__ == "__main__":
    main()
