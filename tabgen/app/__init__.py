"""
App Subpackage

    - cli.py: The `tab-gen` command line (python -m tabgen.app.cli --help)
"""
