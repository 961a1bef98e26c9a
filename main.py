"""
DICOM Stack - Command Line Interface

Decodes a batch of DICOM slices and prints their playback order.
Equivalent to the installed ``dicom-stack`` command.
"""

import sys

from dicom_stack.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
