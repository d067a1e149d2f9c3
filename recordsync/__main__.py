"""
CLI entry point, when used as a module: `python -m recordsync`.

Useful for debugging in the IDEs (use the start-mode "Module", module "recordsync").
"""
from recordsync import cli

if __name__ == '__main__':
    cli.main()
