"""Package entry point for ``python -m dictation_practice``.

WHY: Users run the tool as ``python -m dictation_practice <url>`` to fetch
and practise a video, or ``python -m dictation_practice --serve`` to start
the HTTP API.

HOW: Checks sys.argv for the ``--serve`` flag. If present, launches the
uvicorn server. Otherwise, delegates to the CLI's main() function.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from dictation_practice.server.app import run_api
        run_api()
    else:
        from dictation_practice.cli import main
        main()
