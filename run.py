import logging
import os
import sys

from app import create_app

logger = logging.getLogger("portal")


def main():
    try:
        app = create_app()
    except Exception:
        logger.exception("DB init failed")
        sys.exit(1)
    port = int(os.environ.get("PORT", 3000))
    logger.info("Server running on http://localhost:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
