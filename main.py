"""
main.py
-------
Entry point for the Classical Review API server.

Responsibilities:
    - Build the Flask app with its blueprints and error boundary.
    - Initialize the database connection pool and schema.
    - Serve HTTP until interrupted, then release the pool.
"""

from flask import Flask

from config import APP_ENV, HOST, PORT
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from handlers.account_handler import account_bp
from handlers.error_handler import register_error_handlers
from handlers.review_handler import review_bp
from handlers.search_handler import search_bp
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app() -> Flask:
    """Build the Flask application. No database work happens here."""
    app = Flask(__name__)
    app.json.sort_keys = False

    app.register_blueprint(account_bp)
    app.register_blueprint(review_bp)
    app.register_blueprint(search_bp)
    register_error_handlers(app)
    return app


def main() -> None:
    """Initialize the database and run the server."""
    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Flask application ────────────────────
    app = create_app()

    # ── 3. Serve ──────────────────────────────────────────
    logger.info(f"Classical Review API running on {HOST}:{PORT} ({APP_ENV})")
    try:
        app.run(host=HOST, port=PORT, threaded=True)
    finally:
        # ── 4. Cleanup on shutdown ────────────────────────
        close_pool()
        logger.info("Classical Review API stopped.")


if __name__ == "__main__":
    main()
