#!/usr/bin/env python3
"""Talk to a running sven desk bridge over HTTP."""

import sys

from sven.ctl import main

if __name__ == "__main__":
    sys.exit(main())
