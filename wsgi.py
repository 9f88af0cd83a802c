"""
Meetup Newsletter server
========================

Run with:
    python wsgi.py

Or with any WSGI server:
    gunicorn wsgi:app
"""

from meetup_newsletter import create_app
from meetup_newsletter.core.config import Config

app = create_app()


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Meetup Newsletter")
    print("=" * 60)
    print(f"Subscribe:    POST http://localhost:{Config.port}/subscribe")
    print(f"Send update:  POST http://localhost:{Config.port}/send-update")
    print(f"Events:       GET  http://localhost:{Config.port}/events")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
