"""Project root entry point for launching the web interface."""

from __future__ import annotations


def main():
    from transync.web import create_app

    app = create_app()
    # Single process: the engine loop lives in this process only
    app.run(host="127.0.0.1", port=5500, debug=False, use_reloader=False, threaded=True)


if __name__ == "__main__":
    main()
