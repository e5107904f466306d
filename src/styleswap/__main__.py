"""Allow ``python -m styleswap`` to launch the UI."""

from styleswap.ui.app import main

if __name__ == "__main__":
    main()
