"""DICOM Stack CLI Package.

Public API:
- main: CLI entry point
"""

from dicom_stack.cli.main import main

__all__ = ["main"]
