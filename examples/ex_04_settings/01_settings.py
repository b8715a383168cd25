"""Environment-driven settings.

``ServiceManagerSettings`` reads ``PLUGINWIRE_*`` environment variables. Pass
it to a manager to use them as defaults; explicit keywords still win, and a
manager built without settings never looks at the environment.
"""

from __future__ import annotations

import os

from pluginwire import ServiceManager, ServiceManagerSettings


def main() -> None:
    os.environ["PLUGINWIRE_ALLOW_OVERRIDE"] = "true"
    os.environ["PLUGINWIRE_LOCK_MODE"] = "thread"
    settings = ServiceManagerSettings()

    services = ServiceManager(settings=settings)
    print(f"allow_override={services.get_allow_override()}")  # => allow_override=True
    print(f"lock_mode={services.lock_mode.value}")  # => lock_mode=thread

    explicit = ServiceManager(allow_override=False, settings=settings)
    print(f"explicit_allow_override={explicit.get_allow_override()}")  # => explicit_allow_override=False

    plain = ServiceManager()
    print(f"plain_allow_override={plain.get_allow_override()}")  # => plain_allow_override=False


if __name__ == "__main__":
    main()
