"""
Studiofolio
===========

Runs the portfolio site with every module enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000              - Homepage
    http://localhost:5000/portfolio/   - Portfolio
    http://localhost:5000/admin        - Admin dashboard
"""

from flask import Flask
from studiofolio import Studiofolio
from studiofolio.core.config import Config

app = Flask(__name__)

studiofolio = Studiofolio(app)


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print(app.config.get('BRAND_NAME'))
    print("=" * 60)
    print(f"Homepage:        http://localhost:{Config.port}")
    print(f"Admin Panel:     http://localhost:{Config.port}/admin")
    print(f"Admin Setup:     http://localhost:{Config.port}/admin/signup")
    print(f"Health:          http://localhost:{Config.port}/health")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
