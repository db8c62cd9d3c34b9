#!/usr/bin/env python3
"""Run the sven desk bridge: MQTT mirror, night-mode policy and HTTP gateway."""

from sven.service import main

if __name__ == "__main__":
    main()
