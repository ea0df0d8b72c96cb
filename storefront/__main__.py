"""Development server: `python -m storefront`. Use a WSGI server in production."""
import os

from . import create_app


def main():
    app = create_app(os.getenv("APP_ENV"))
    host = os.getenv("STOREFRONT_HOST", "127.0.0.1")
    port = int(os.getenv("STOREFRONT_PORT", "5000"))
    app.run(host=host, port=port, debug=app.config.get("DEBUG", False))


if __name__ == "__main__":
    main()
